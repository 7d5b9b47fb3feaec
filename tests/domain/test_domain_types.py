"""Tests for domain constants, enums, and flag parsing."""

import pytest

from multipress.domain.errors import (
    GenesisConflictError,
    MultipressError,
    ReservedIdentifierError,
    ReservedKeyError,
)
from multipress.domain.types import GENESIS_ID, UNLIMITED_DEPTH, EntityKind, parse_flag


def test_entity_kinds() -> None:
    assert {k.value for k in EntityKind} == {"domain", "user", "document"}
    for member in EntityKind:
        assert member == member.value


def test_reserved_values() -> None:
    assert GENESIS_ID == 0
    assert UNLIMITED_DEPTH < 0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, True),
        ("1", True),
        ("yes", True),
        ("anything", True),
        ("", False),
        ("0", False),
        ("false", False),
        (" False ", False),
        ("no", False),
        ("off", False),
    ],
)
def test_parse_flag(raw: str | None, expected: bool) -> None:
    assert parse_flag(raw, True) is expected


def test_parse_flag_default() -> None:
    assert parse_flag(None, False) is False


@pytest.mark.parametrize(
    "exc_cls", [ReservedIdentifierError, GenesisConflictError, ReservedKeyError]
)
def test_errors_share_base(exc_cls: type[Exception]) -> None:
    assert issubclass(exc_cls, MultipressError)
