"""Shared pytest fixtures and test helpers for multipress tests."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from multipress.domain.domains import Domain
from multipress.domain.environment import Environment
from multipress.domain.users import User
from multipress.infrastructure.database.engine import init_database
from multipress.infrastructure.database.memory import MemoryDatabase
from multipress.plugins.builtins.pages import PageType

GENESIS_NAME = "example.org"


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler changes made by configure_logging (CLI tests call it)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    package = logging.getLogger("multipress")
    package_level = package.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    package.setLevel(package_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path / "multipress.db")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def memory_db() -> MemoryDatabase:
    return MemoryDatabase()


def make_env(database: MemoryDatabase, **kwargs: object) -> Environment:
    """A fresh Environment over *database* with the pages type registered."""
    env = Environment(
        database,
        GENESIS_NAME,
        {"title": "Root"},
        {"name": "admin"},
        **kwargs,  # type: ignore[arg-type]
    )
    env.add_type(PageType())
    return env


@pytest.fixture
def env(memory_db: MemoryDatabase) -> Environment:
    return make_env(memory_db)


@pytest.fixture
def env_factory() -> Callable[..., Environment]:
    """Build further Environments (new sessions) over an existing database."""
    return make_env


@dataclass
class Graph:
    """A small tenancy tree.

    ``example.org`` (genesis, owned by ``root``)
      └─ ``a.example.org`` (owned by ``root``)      users: alice
           └─ ``b.a.example.org`` (owned by alice) users: bob
    ``eve`` self-registered on genesis.
    """

    env: Environment
    database: MemoryDatabase
    root: User
    genesis: Domain
    a: Domain
    b: Domain
    alice: User
    bob: User
    eve: User


def build_graph(env: Environment, database: MemoryDatabase) -> Graph:
    root = User.genesis(env)
    genesis = Domain.genesis(env)

    a = Domain.create(env, "a.example.org", root, genesis)
    assert a.save(root)
    alice = User.create(env, a)
    assert alice.save(root)

    b = Domain.create(env, "b.a.example.org", alice, a)
    assert b.save(alice)
    bob = User.create(env, b)
    assert bob.save(alice)

    eve = User.create(env, genesis)
    assert eve.save(eve)

    return Graph(env, database, root, genesis, a, b, alice, bob, eve)


@pytest.fixture
def graph(env: Environment, memory_db: MemoryDatabase) -> Graph:
    """The seeded tenancy tree described on :class:`Graph`."""
    return build_graph(env, memory_db)


@pytest.fixture
def _isolated_site(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """CWD with a multipress.toml pointing at a SQLite file inside tmp_path."""
    for var in ("MULTIPRESS_CONFIG", "MULTIPRESS_HOST", "MULTIPRESS_ACTING_USER"):
        monkeypatch.delenv(var, raising=False)
    (tmp_path / "multipress.toml").write_text(
        '[genesis]\nname = "localhost"\n\n[database]\npath = "site.db"\n'
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path
