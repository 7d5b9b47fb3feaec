"""Exceptions for integration errors.

Permission denial and missing rows are never exceptions: predicates return
``False`` and lookups return ``None``. These are raised only when calling
code misuses the graph.
"""

from __future__ import annotations


class MultipressError(Exception):
    """Base class for all multipress errors."""


class ReservedIdentifierError(MultipressError, ValueError):
    """The reserved genesis id reached the storage path."""


class GenesisConflictError(MultipressError):
    """A genesis node was seeded twice with different data in one context."""


class ReservedKeyError(MultipressError, ValueError):
    """A data-bag write targeted a key that names a typed field."""
