"""Command-line interface for Helpful.

Operator commands for creating the schema, creating accounts, routing
mailbox addresses and syncing billing with Chargify.
"""

import asyncio
from typing import Any, Awaitable, Callable, NoReturn

import click

from helpful.core.config import get_settings
from helpful.core.exceptions import HelpfulError
from helpful.core.logging import bind_account_id, clear_context, configure_logging, get_logger


def _run(action: Callable[..., Awaitable[Any]], *args: Any) -> Any:
    """Run an async action with a session, then dispose of the engine."""
    from helpful.infrastructure.persistence.database import close_database, get_db_manager

    async def runner() -> Any:
        try:
            async with get_db_manager().session() as session:
                return await action(session, *args)
        finally:
            await close_database()

    try:
        return asyncio.run(runner())
    except HelpfulError as e:
        raise click.ClickException(e.message) from e


def _billing_provider():
    from helpful.infrastructure.services.billing import chargify_provider_from_settings

    try:
        return chargify_provider_from_settings(get_settings())
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version="0.1.0", prog_name="Helpful")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Override the configured log level",
)
def cli(log_level: str | None) -> None:
    """Helpful account administration."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)


@cli.command("init-db")
def init_db() -> None:
    """Create all tables and seed the default billing plans."""
    from helpful.infrastructure.persistence.database import close_database, init_database

    async def initialize() -> None:
        try:
            await init_database()
        finally:
            await close_database()

    asyncio.run(initialize())
    click.echo("Database initialized successfully.")


@cli.command("create-account")
@click.argument("name")
@click.option("--slug", default=None, help="Explicit slug (derived from NAME if omitted)")
@click.option("--owner-email", default=None, help="Email of the user that owns the account")
def create_account(name: str, slug: str | None, owner_email: str | None) -> None:
    """Create an account named NAME."""
    from helpful.domain.services import AccountService, build_mailbox
    from helpful.infrastructure.persistence.models import UserModel
    from helpful.infrastructure.persistence.repositories import UserRepository

    async def create(session) -> Any:
        owner = None
        if owner_email:
            owner = await UserRepository(session).get_by_email(owner_email)
            if owner is None:
                owner = UserModel(email=owner_email)
        return await AccountService(session).create_account(name, owner=owner, slug=slug)

    account = _run(create)
    mailbox = build_mailbox(account.slug, account.name, get_settings().incoming_email_domain)
    click.echo(
        f"Account created:\n"
        f"  ID:       {account.id}\n"
        f"  Slug:     {account.slug}\n"
        f"  Mailbox:  {mailbox}\n"
    )


@cli.command("match-mailbox")
@click.argument("address")
def match_mailbox(address: str) -> None:
    """Print the account that receives mail sent to ADDRESS."""
    from helpful.domain.services import AccountService

    async def match(session) -> Any:
        return await AccountService(session).match_mailbox_or_raise(address)

    account = _run(match)
    click.echo(f"{account.slug}\t{account.id}\t{account.name}")


@cli.command("portal-url")
@click.argument("slug")
def portal_url(slug: str) -> None:
    """Print the Chargify portal URL of the account SLUG."""
    from helpful.domain.services import AccountService, BillingService

    provider = _billing_provider()

    async def fetch(session) -> str:
        account = await AccountService(session).get_by_slug(slug)
        return await BillingService(session, provider).get_portal_url(account)

    url = _run(fetch)
    if not url:
        raise click.ClickException(f"No portal URL available for '{slug}'")
    click.echo(url)


@cli.command("sync-billing")
@click.argument("slugs", nargs=-1)
@click.option("--all", "sync_all", is_flag=True, help="Sync every account")
def sync_billing(slugs: tuple[str, ...], sync_all: bool) -> None:
    """Refresh billing status of the accounts SLUGS from Chargify."""
    from helpful.domain.services import AccountService, BillingService
    from helpful.infrastructure.persistence.repositories import AccountRepository

    if not slugs and not sync_all:
        raise click.UsageError("Pass one or more slugs or --all")

    provider = _billing_provider()
    logger = get_logger(__name__)

    async def sync(session) -> list[tuple[str, str | None]]:
        if sync_all:
            accounts = await AccountRepository(session).list_all()
        else:
            service = AccountService(session)
            accounts = [await service.get_by_slug(slug) for slug in slugs]

        billing = BillingService(session, provider)
        results = []
        for account in accounts:
            bind_account_id(account.id)
            try:
                await billing.refresh_subscription(account)
            finally:
                clear_context()
            results.append((account.slug, account.billing_status))
        logger.info("Billing sync finished", accounts=len(results))
        return results

    for slug, status in _run(sync):
        click.echo(f"{slug}\t{status or '-'}")


@cli.command("check-billing")
def check_billing() -> None:
    """Verify that the configured Chargify site accepts the API key."""
    provider = _billing_provider()
    ok, message = asyncio.run(provider.test_connection())
    if not ok:
        raise click.ClickException(message)
    click.echo(message)


@cli.command()
def info() -> None:
    """Display configuration."""
    settings = get_settings()

    click.echo(f"""
Helpful v{settings.app_version}
{'=' * 40}

Environment:     {settings.environment}
Database:        {settings.database_url}
Incoming mail:   @{settings.incoming_email_domain}
Chargify:        {settings.chargify_subdomain or '(not configured)'}
Logging:         {settings.log_level} ({settings.log_format})
""")


def main() -> NoReturn:
    """Entry point for the ``helpful`` command and ``python -m helpful``."""
    cli()


if __name__ == "__main__":
    main()
