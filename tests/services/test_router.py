"""Tests for Router dispatch by document type slug."""

from __future__ import annotations

import pytest

from multipress.domain.documents import Document
from multipress.services.router import Router


@pytest.fixture
def page(graph) -> Document:
    page = Document(graph.env, graph.env.get_type("pages"), graph.alice, graph.b)
    page.update({"title": "Welcome", "body": "Hi", "visibility": "public"})
    assert page.save(graph.alice)
    graph.env.authenticate(graph.alice)
    return page


class TestDispatch:
    def test_type_index(self, graph, page) -> None:
        assert Router(graph.env).dispatch("/pages") == f"{page.id}: Welcome"

    def test_trailing_slash_is_index(self, graph, page) -> None:
        assert Router(graph.env).dispatch("/pages/") == f"{page.id}: Welcome"

    def test_remainder_passed_to_type(self, graph, page) -> None:
        assert Router(graph.env).dispatch(f"/pages/{page.id}") == "Welcome\n\nHi"

    def test_leading_slash_optional(self, graph, page) -> None:
        assert Router(graph.env).dispatch(f"pages/{page.id}") == "Welcome\n\nHi"

    @pytest.mark.parametrize("path", ["", "/", "/nope", "/nope/1"])
    def test_unknown_type(self, graph, path: str) -> None:
        assert Router(graph.env).dispatch(path) == "Error 404"

    def test_not_found_from_current_domain(self, graph, page, env_factory) -> None:
        session = env_factory(graph.database, host="b.a.example.org")
        router = Router(session)
        assert router.dispatch("/missing") == "Not found"
        assert router.dispatch(f"/pages/{page.id}") == "Welcome\n\nHi"

    def test_custom_type(self, graph) -> None:
        class EchoType:
            slug = "echo"

            def render(self, environment, request: str) -> str:
                return request

            def is_creatable(self, *args) -> bool:
                return False

            is_readable_by_public = is_readable = is_editable = is_deletable = is_creatable

            def on_insert(self, document) -> None:
                pass

            on_update = on_insert

        assert graph.env.add_type(EchoType())
        assert Router(graph.env).dispatch("/echo/a/b") == "/a/b"
