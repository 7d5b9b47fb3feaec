"""Entity kinds and reserved values shared across the domain layer."""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """The three kinds of node in the tenancy graph."""

    DOMAIN = "domain"
    USER = "user"
    DOCUMENT = "document"


GENESIS_ID = 0  # reserved for the genesis domain and user, never stored
UNLIMITED_DEPTH = -1

# Keys that name typed fields and may not be written into an entity's data bag.
DOMAIN_RESERVED_KEYS = frozenset({"id", "name", "owner", "origin", "data", "ancestry"})
USER_RESERVED_KEYS = frozenset({"id", "origin", "data"})
DOCUMENT_RESERVED_KEYS = frozenset({"id", "owner", "origin", "type", "data"})

_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def parse_flag(value: str | None, default: bool) -> bool:
    """Interpret a data-bag string as a boolean, falling back to *default* when unset."""
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_STRINGS
