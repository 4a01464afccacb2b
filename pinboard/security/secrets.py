"""Lookup of the two secrets Pinboard needs: the token signing key and bucket credentials."""
from __future__ import annotations

import os
from typing import Final

__all__ = ["MissingSecretError", "require_secret", "is_placeholder"]

# Values shipped in sample .env files that must never reach production.
_PLACEHOLDER_VALUES: Final[frozenset[str]] = frozenset(
    {"changeme", "change-me", "placeholder", "secret-key", "your-secret-key", "your-spaces-key", "todo", "xxx"}
)


class MissingSecretError(RuntimeError):
    """A required secret is absent or still set to a sample value."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Environment variable {name} is required and must not use placeholder defaults")
        self.name = name


def is_placeholder(value: str | None) -> bool:
    normalized = (value or "").strip().lower()
    return normalized in _PLACEHOLDER_VALUES or not normalized


def require_secret(name: str) -> str:
    """Return the trimmed value of ``name`` from the environment."""

    value = os.environ.get(name, "")
    if is_placeholder(value):
        raise MissingSecretError(name)
    return value.strip()
