"""Tests for LookupCache and ConstructionGuard."""

from __future__ import annotations

import pytest

from multipress.domain.cache import ConstructionGuard, LookupCache
from multipress.domain.domains import Domain
from multipress.domain.types import EntityKind
from multipress.domain.users import User


class TestLookupCache:
    def test_empty_get(self) -> None:
        cache = LookupCache()
        assert cache.get(EntityKind.DOMAIN, "name", "x") == []

    def test_append_only_in_order(self, graph) -> None:
        cache = LookupCache()
        cache.save(EntityKind.DOMAIN, "name", "x", graph.b)
        cache.save(EntityKind.DOMAIN, "name", "x", graph.a)
        cache.save(EntityKind.DOMAIN, "name", "x", graph.a)
        assert cache.get(EntityKind.DOMAIN, "name", "x") == [graph.b, graph.a, graph.a]

    def test_keys_are_stringified(self, graph) -> None:
        cache = LookupCache()
        cache.save(EntityKind.USER, "id", 7, graph.alice)
        assert cache.get(EntityKind.USER, "id", "7") == [graph.alice]

    def test_get_returns_copy(self, graph) -> None:
        cache = LookupCache()
        cache.save(EntityKind.USER, "id", 1, graph.alice)
        cache.get(EntityKind.USER, "id", 1).clear()
        assert cache.get(EntityKind.USER, "id", 1) == [graph.alice]

    def test_kinds_are_separate(self, graph) -> None:
        cache = LookupCache()
        cache.save(EntityKind.USER, "id", 1, graph.alice)
        assert cache.get(EntityKind.DOMAIN, "id", 1) == []
        assert cache.sections(EntityKind.USER) == ["id"]

    def test_loaded_sections_tracked_separately(self, graph) -> None:
        cache = LookupCache()
        cache.save(EntityKind.DOMAIN, "name", "a.example.org", graph.a)
        assert not cache.is_loaded(EntityKind.DOMAIN, "name", "a.example.org")
        cache.mark_loaded(EntityKind.DOMAIN, "name", "a.example.org")
        assert cache.is_loaded(EntityKind.DOMAIN, "name", "a.example.org")
        assert not cache.is_loaded(EntityKind.USER, "name", "a.example.org")
        assert not cache.is_loaded(EntityKind.DOMAIN, "name", "b.a.example.org")

    def test_first_created_picks_lowest_id(self, graph) -> None:
        assert LookupCache.first_created([graph.b, graph.a]) is graph.a

    def test_first_created_ignores_drafts(self, env) -> None:
        draft = User.create(env, Domain.genesis(env))
        assert LookupCache.first_created([draft]) is None
        assert LookupCache.first_created([]) is None


class TestConstructionGuard:
    def test_marks_only_inside_block(self) -> None:
        guard = ConstructionGuard()
        with guard.constructing(EntityKind.DOMAIN, 4):
            assert guard.is_constructing(EntityKind.DOMAIN, 4)
            assert not guard.is_constructing(EntityKind.USER, 4)
        assert not guard.is_constructing(EntityKind.DOMAIN, 4)

    def test_cleared_on_error(self) -> None:
        guard = ConstructionGuard()
        with pytest.raises(RuntimeError), guard.constructing(EntityKind.USER, 2):
            raise RuntimeError
        assert not guard.is_constructing(EntityKind.USER, 2)
