"""Tests for the user command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from multipress.cli import cli

pytestmark = pytest.mark.usefixtures("_isolated_site")


class TestCreate:
    def test_genesis_creates_user(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "user", "create", "--origin", "localhost", "--set", "name=sam"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)["data"]
        assert data == {"id": 1, "origin": "localhost", "data": {"name": "sam"}}

    def test_act_as_created_user(self, cli_runner: CliRunner) -> None:
        assert cli_runner.invoke(cli, ["user", "create", "--origin", "localhost"]).exit_code == 0
        result = cli_runner.invoke(cli, ["--as", "1", "domain", "show", "localhost"])
        assert result.exit_code == 0
        assert "depth_allowed: 0" in result.output

    def test_unknown_acting_user(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--as", "99", "user", "create", "--origin", "localhost"])
        assert result.exit_code == 1
        assert "No user with id 99" in result.output

    def test_outsider_cannot_add_users(self, cli_runner: CliRunner) -> None:
        created = cli_runner.invoke(
            cli,
            ["domain", "create", "blog.localhost", "--origin", "localhost"],
        )
        assert created.exit_code == 0
        assert cli_runner.invoke(cli, ["user", "create", "--origin", "localhost"]).exit_code == 0
        result = cli_runner.invoke(
            cli, ["--as", "1", "user", "create", "--origin", "blog.localhost"]
        )
        assert result.exit_code == 1
        assert "[FORBIDDEN]" in result.output

    def test_requires_origin(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["user", "create"])
        assert result.exit_code == 2
