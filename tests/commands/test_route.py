"""Tests for the route command."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from multipress.cli import cli
from multipress.infrastructure.database.engine import init_database
from multipress.infrastructure.database.sql import SqlDatabase


@pytest.fixture
def pages(_isolated_site: Path) -> tuple[int, int]:
    engine = init_database(_isolated_site / "site.db")
    try:
        database = SqlDatabase(engine)
        public = database.insert_document(
            0, 0, "pages", {"title": "Hello", "body": "World", "visibility": "public"}
        )
        private = database.insert_document(0, 0, "pages", {"title": "Secret"})
    finally:
        engine.dispose()
    return public, private


class TestRoute:
    def test_index_as_genesis(self, cli_runner: CliRunner, pages: tuple[int, int]) -> None:
        public, private = pages
        result = cli_runner.invoke(cli, ["route", "/pages"])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [f"{public}: Hello", f"{private}: Secret"]

    def test_single_page(self, cli_runner: CliRunner, pages: tuple[int, int]) -> None:
        public, _private = pages
        result = cli_runner.invoke(cli, ["route", f"/pages/{public}"])
        assert result.output == "Hello\n\nWorld\n"

    def test_public_visitor(self, cli_runner: CliRunner, pages: tuple[int, int]) -> None:
        public, _private = pages
        result = cli_runner.invoke(cli, ["--host", "localhost", "route", "/pages", "--public"])
        assert result.output.splitlines() == [f"{public}: Hello"]

    def test_public_visitor_hidden_page(
        self, cli_runner: CliRunner, pages: tuple[int, int]
    ) -> None:
        _public, private = pages
        result = cli_runner.invoke(
            cli, ["--host", "localhost", "route", f"/pages/{private}", "--public"]
        )
        assert result.output.strip() == "Not found"

    @pytest.mark.usefixtures("_isolated_site")
    def test_unknown_type_without_host(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["route", "/nope"])
        assert result.exit_code == 0
        assert result.output.strip() == "Error 404"

    @pytest.mark.usefixtures("_isolated_site")
    def test_unknown_type_with_host(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--host", "localhost", "route", "/nope"])
        assert result.output.strip() == "Not found"

    @pytest.mark.usefixtures("_isolated_site")
    def test_builtins_disabled(self, cli_runner: CliRunner, _isolated_site: Path) -> None:
        with (_isolated_site / "multipress.toml").open("a") as fh:
            fh.write("\n[plugins]\nbuiltins = false\n")
        result = cli_runner.invoke(cli, ["route", "/pages"])
        assert result.output.strip() == "Error 404"
