"""Tests for the can command."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from multipress.cli import cli

pytestmark = pytest.mark.usefixtures("_isolated_site")


@pytest.fixture
def site(cli_runner: CliRunner) -> CliRunner:
    assert cli_runner.invoke(
        cli, ["domain", "create", "blog.localhost", "--origin", "localhost"]
    ).exit_code == 0
    assert cli_runner.invoke(
        cli, ["user", "create", "--origin", "blog.localhost"]
    ).exit_code == 0
    return cli_runner


def _can(runner: CliRunner, *args: str) -> dict:
    result = runner.invoke(cli, ["--json", *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.output)["data"]


class TestCan:
    def test_genesis_may_update_anything(self, site: CliRunner) -> None:
        data = _can(site, "can", "update", "domain", "blog.localhost")
        assert data["allowed"] is True
        assert data["actor"] == 0

    def test_user_edits_themselves(self, site: CliRunner) -> None:
        assert _can(site, "--as", "1", "can", "update", "user", "1")["allowed"] is True

    def test_user_cannot_update_origin(self, site: CliRunner) -> None:
        data = _can(site, "--as", "1", "can", "update", "domain", "blog.localhost")
        assert data["allowed"] is False

    def test_user_reads_origin(self, site: CliRunner) -> None:
        assert _can(site, "--as", "1", "can", "read", "domain", "blog.localhost")["allowed"] is True

    def test_invalid_choice(self, site: CliRunner) -> None:
        result = site.invoke(cli, ["can", "publish", "domain", "blog.localhost"])
        assert result.exit_code == 2

    def test_missing_target(self, site: CliRunner) -> None:
        result = site.invoke(cli, ["can", "read", "user", "42"])
        assert result.exit_code == 1
        assert "[NOT_FOUND]" in result.output

    def test_non_numeric_id(self, site: CliRunner) -> None:
        result = site.invoke(cli, ["can", "read", "document", "first"])
        assert result.exit_code == 1
        assert "[INVALID_ARGUMENT]" in result.output
