"""Tests for database schema definitions."""

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine

from multipress.infrastructure.database.schema import metadata


@pytest.fixture
def engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")
    metadata.create_all(engine)
    return engine


class TestTables:
    @pytest.mark.parametrize(
        ("table", "columns"),
        [
            ("domains", {"id", "name", "owner", "origin", "data"}),
            ("users", {"id", "origin", "data"}),
            ("documents", {"id", "type", "owner", "origin", "data"}),
        ],
    )
    def test_columns(self, engine: Engine, table: str, columns: set[str]) -> None:
        found = {col["name"] for col in inspect(engine).get_columns(table)}
        assert found == columns

    @pytest.mark.parametrize("table", ["domains", "users", "documents"])
    def test_integer_primary_key(self, engine: Engine, table: str) -> None:
        pk = inspect(engine).get_pk_constraint(table)
        assert pk["constrained_columns"] == ["id"]

    @pytest.mark.parametrize("table", ["domains", "users", "documents"])
    def test_no_foreign_keys(self, engine: Engine, table: str) -> None:
        # origin and owner may hold the genesis id, which has no row
        assert inspect(engine).get_foreign_keys(table) == []


class TestIndexes:
    def test_domain_name_index(self, engine: Engine) -> None:
        names = {ix["name"] for ix in inspect(engine).get_indexes("domains")}
        assert "ix_domains_name" in names

    def test_document_type_index(self, engine: Engine) -> None:
        names = {ix["name"] for ix in inspect(engine).get_indexes("documents")}
        assert "ix_documents_type" in names
