"""Slug generator service.

Derives friendly, mailbox-safe slugs from account names. A slug is used
both in URLs and as the local part of the account's mailbox address, so
it is restricted to lowercase ASCII letters, digits and single hyphens.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Awaitable, Callable


@dataclass(frozen=True)
class SlugValidationError:
    """Represents a slug validation error.

    Attributes:
        field: Always ``slug``.
        message: Human-readable error message.
        code: Machine-readable error code.
    """

    field: str
    message: str
    code: str


class SlugGenerator:
    """Generate and validate account slugs.

    Slug rules:
    - 1-64 characters
    - Lowercase letters, digits and hyphens
    - No leading, trailing or doubled hyphens
    """

    MIN_LENGTH = 1
    MAX_LENGTH = 64
    FALLBACK = "account"

    VALID_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

    @classmethod
    def generate(cls, text: str) -> str:
        """Generate a slug from text.

        Args:
            text: The text to convert, normally the account name.

        Returns:
            Slug candidate. Not guaranteed unique; see ``generate_unique``.

        Examples:
            >>> SlugGenerator.generate("Acme Corp")
            'acme-corp'
            >>> SlugGenerator.generate("Café & Co.")
            'cafe-co'
            >>> SlugGenerator.generate("!!!")
            'account'
        """
        normalized = unicodedata.normalize("NFKD", text or "")
        ascii_text = normalized.encode("ascii", "ignore").decode("ascii")

        slug = re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")

        if len(slug) > cls.MAX_LENGTH:
            slug = slug[: cls.MAX_LENGTH].rstrip("-")

        return slug or cls.FALLBACK

    @classmethod
    async def generate_unique(
        cls,
        text: str,
        exists: Callable[[str], Awaitable[bool]],
    ) -> str:
        """Generate a slug that ``exists`` reports as free.

        Conflicts get a numeric suffix: ``acme``, ``acme-2``, ``acme-3``...

        Args:
            text: The text to convert.
            exists: Async predicate telling whether a slug is taken.

        Returns:
            A slug that was free when checked.
        """
        base = cls.generate(text)
        slug = base
        counter = 2
        while await exists(slug):
            suffix = f"-{counter}"
            slug = f"{base[: cls.MAX_LENGTH - len(suffix)].rstrip('-')}{suffix}"
            counter += 1
        return slug

    @classmethod
    def validate(cls, slug: str) -> list[SlugValidationError]:
        """Validate a slug against the rules.

        Args:
            slug: The slug to validate.

        Returns:
            List of validation errors. Empty list if slug is valid.
        """
        errors: list[SlugValidationError] = []

        if len(slug) < cls.MIN_LENGTH:
            errors.append(
                SlugValidationError(
                    field="slug",
                    message="Slug can't be blank",
                    code="slug_blank",
                )
            )
            return errors

        if len(slug) > cls.MAX_LENGTH:
            errors.append(
                SlugValidationError(
                    field="slug",
                    message=f"Slug must be at most {cls.MAX_LENGTH} characters",
                    code="slug_too_long",
                )
            )

        if not cls.VALID_SLUG_PATTERN.match(slug):
            errors.append(
                SlugValidationError(
                    field="slug",
                    message="Slug must contain only lowercase letters, numbers, and single hyphens",
                    code="slug_invalid_chars",
                )
            )

        return errors

    @classmethod
    def is_valid(cls, slug: str) -> bool:
        """Check if a slug is valid."""
        return len(cls.validate(slug)) == 0
