"""Unit tests for SlugGenerator."""

import pytest

from helpful.domain.services.mailbox import MAILBOX_PATTERN
from helpful.domain.services.slug_generator import SlugGenerator


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Acme", "acme"),
        ("Acme Corp", "acme-corp"),
        ("  Test & Company, Inc. ", "test-company-inc"),
        ("Café Crème", "cafe-creme"),
        ("42 Widgets", "42-widgets"),
        ("snake_case_name", "snake-case-name"),
        ("!!!", "account"),
        ("", "account"),
    ],
)
def test_generate(name, expected):
    assert SlugGenerator.generate(name) == expected


def test_generate_truncates_without_trailing_hyphen():
    slug = SlugGenerator.generate("word " * 40)
    assert len(slug) <= SlugGenerator.MAX_LENGTH
    assert not slug.endswith("-")


def test_generated_slugs_are_mailbox_safe():
    for name in ["Acme Corp", "Ünïcödé Ltd", "a+b@c", "x" * 100]:
        slug = SlugGenerator.generate(name)
        assert MAILBOX_PATTERN.match(f"{slug}@helpful.io")
        assert SlugGenerator.is_valid(slug)


@pytest.mark.asyncio
async def test_generate_unique_appends_counter():
    taken = {"acme", "acme-2"}

    async def exists(slug):
        return slug in taken

    assert await SlugGenerator.generate_unique("Acme", exists) == "acme-3"


@pytest.mark.asyncio
async def test_generate_unique_free_slug_unchanged():
    async def exists(slug):
        return False

    assert await SlugGenerator.generate_unique("Acme Corp", exists) == "acme-corp"


@pytest.mark.asyncio
async def test_generate_unique_keeps_max_length():
    base = SlugGenerator.generate("a" * 100)

    async def exists(slug):
        return slug == base

    slug = await SlugGenerator.generate_unique("a" * 100, exists)
    assert slug.endswith("-2")
    assert len(slug) <= SlugGenerator.MAX_LENGTH


def test_validate_valid_slug():
    assert SlugGenerator.validate("acme-corp-2") == []


@pytest.mark.parametrize(
    "slug, code",
    [
        ("", "slug_blank"),
        ("Acme", "slug_invalid_chars"),
        ("acme--corp", "slug_invalid_chars"),
        ("-acme", "slug_invalid_chars"),
        ("acme+tag", "slug_invalid_chars"),
        ("a" * 65, "slug_too_long"),
    ],
)
def test_validate_errors(slug, code):
    errors = SlugGenerator.validate(slug)
    assert code in [error.code for error in errors]
    assert all(error.field == "slug" for error in errors)
