"""Account mailbox addresses.

Every account receives email at ``<slug>@<incoming email domain>``. Senders
may add a ``+tag`` to the local part (``acme+billing@helpful.io``); the tag
is ignored when routing the message back to an account.
"""

import re
from email.headerregistry import Address
from email.utils import parseaddr

# Slug followed by an optional single +tag, then the domain
MAILBOX_PATTERN = re.compile(r"^(?P<slug>[\w-]+)(\+\w+)?@.+$", re.ASCII)


def build_mailbox(slug: str, name: str, incoming_email_domain: str) -> Address:
    """Build the mailbox address for an account.

    Args:
        slug: Account slug, used as the local part.
        name: Account name, used as the display name.
        incoming_email_domain: Domain that receives incoming mail.

    Returns:
        Address whose ``str()`` is ``"Name" <slug@domain>`` and whose
        ``addr_spec`` is the bare address.
    """
    return Address(display_name=name, username=slug, domain=incoming_email_domain)


def parse_address(raw_address: str | None) -> str:
    """Strip the display name and angle brackets from an address.

    >>> parse_address('"Acme" <acme+support@helpful.io>')
    'acme+support@helpful.io'
    """
    if not raw_address:
        return ""
    return parseaddr(raw_address)[1]


def extract_mailbox_slug(raw_address: str | None) -> str | None:
    """Extract the account slug from an incoming address.

    Returns:
        The slug, or None when the address does not look like a mailbox.
    """
    match = MAILBOX_PATTERN.match(parse_address(raw_address))
    if match is None:
        return None
    return match.group("slug")
