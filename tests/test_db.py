"""Tests for database schema, connection and export using SQLAlchemy Core."""

import sqlite3
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from sqlalchemy import Connection, Table, func, inspect, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import NullPool

from plural_rules.db import (
    create_export_engine,
    export_rules,
    get_connection,
    init_db,
    locale_rules,
    plural_samples,
    rules,
)
from plural_rules.registry import RuleRegistry
from plural_rules.rules import PluralRule


@pytest.fixture
def temp_db() -> Generator[Path]:
    """Create a temporary database with the schema initialized."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    try:
        engine = create_export_engine(db_path)
        init_db(engine)
        engine.dispose()
        yield db_path
    finally:
        db_path.unlink(missing_ok=True)


def _count(conn: Connection, table: Table) -> int:
    return conn.execute(select(func.count()).select_from(table)).scalar() or 0


class TestConnection:
    """Tests for database connection management."""

    def test_engine_is_unpooled(self, temp_db: Path) -> None:
        engine = create_export_engine(str(temp_db))
        try:
            assert isinstance(engine.pool, NullPool)
        finally:
            engine.dispose()

    def test_connection_closed_after_block(self, temp_db: Path) -> None:
        """The DB-API connection is closed once the block exits."""
        with get_connection(temp_db) as conn:
            dbapi_conn = conn.connection.dbapi_connection
            assert dbapi_conn is not None
            dbapi_conn.execute("SELECT 1")

        assert conn.closed
        with pytest.raises(sqlite3.ProgrammingError):
            dbapi_conn.execute("SELECT 1")

    def test_connection_closed_after_error(self, temp_db: Path) -> None:
        with pytest.raises(RuntimeError), get_connection(temp_db) as conn:
            dbapi_conn = conn.connection.dbapi_connection
            raise RuntimeError("boom")

        assert dbapi_conn is not None
        with pytest.raises(sqlite3.ProgrammingError):
            dbapi_conn.execute("SELECT 1")

    def test_connection_context_manager(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            assert isinstance(conn, Connection)

    def test_foreign_keys_enabled(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            result = conn.execute(text("PRAGMA foreign_keys")).fetchone()
            assert result is not None
            assert result[0] == 1

    def test_rolls_back_on_error(self, temp_db: Path) -> None:
        with pytest.raises(RuntimeError), get_connection(temp_db) as conn:
            conn.execute(rules.insert().values(name="czech", categories=["one"]))
            raise RuntimeError("boom")

        with get_connection(temp_db) as conn:
            assert _count(conn, rules) == 0


class TestSchema:
    def test_init_db_creates_tables(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            table_names = set(inspect(conn).get_table_names())
        assert {"rules", "locale_rules", "plural_samples"}.issubset(table_names)

    def test_init_db_is_idempotent(self, temp_db: Path) -> None:
        engine = create_export_engine(temp_db)
        try:
            init_db(engine)
            init_db(engine)
            assert len(inspect(engine).get_table_names()) == 3
        finally:
            engine.dispose()

    def test_locale_rule_foreign_key(self, temp_db: Path) -> None:
        with pytest.raises(IntegrityError), get_connection(temp_db) as conn:
            conn.execute(locale_rules.insert().values(locale="ru", rule="missing"))

    def test_sample_unique_per_rule_and_count(self, temp_db: Path) -> None:
        with pytest.raises(IntegrityError), get_connection(temp_db) as conn:
            conn.execute(rules.insert().values(name="czech", categories=["one", "few", "other"]))
            row = {"rule": "czech", "n": 1, "category": "one", "suffix": "_one"}
            conn.execute(plural_samples.insert().values(**row))
            conn.execute(plural_samples.insert().values(**row))


class TestExportRules:
    def test_writes_all_rules_and_locales(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            stats = export_rules(conn, RuleRegistry(), limit=20)

        assert stats == {"rules": 7, "locales": 8, "samples": 7 * 21}

        with get_connection(temp_db) as conn:
            assert _count(conn, rules) == 7
            assert _count(conn, locale_rules) == 8
            assert _count(conn, plural_samples) == 7 * 21

    def test_rule_rows(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            export_rules(conn, RuleRegistry(), limit=5)
            row = conn.execute(select(rules).where(rules.c.name == "czech")).fetchone()

        assert row is not None
        assert row.categories == ["one", "few", "other"]
        assert row.description.startswith("one = 1; few = 2, 3, 4")

    def test_sample_rows_match_classification(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            export_rules(conn, RuleRegistry(), limit=30)
            row = conn.execute(
                select(plural_samples).where(
                    plural_samples.c.rule == "cyrillic", plural_samples.c.n == 21
                )
            ).fetchone()

        assert row is not None
        assert row.category == "one"
        assert row.suffix == "_one"

    def test_locale_rows(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            export_rules(conn, RuleRegistry({"sk-SK": PluralRule.CZECH}), limit=0)
            rows = conn.execute(select(locale_rules)).fetchall()

        mapping = {row.locale: row.rule for row in rows}
        assert mapping["pl-PL"] == "polish"
        assert mapping["sk-SK"] == "czech"
        assert len(mapping) == 9

    def test_export_replaces_previous_content(self, temp_db: Path) -> None:
        with get_connection(temp_db) as conn:
            export_rules(conn, RuleRegistry(), limit=50)
        with get_connection(temp_db) as conn:
            export_rules(conn, RuleRegistry(), limit=10)
            assert _count(conn, plural_samples) == 7 * 11

    def test_progress_callback(self, temp_db: Path) -> None:
        calls: list[tuple[int, int]] = []
        with get_connection(temp_db) as conn:
            export_rules(
                conn,
                RuleRegistry(),
                limit=1,
                progress_callback=lambda current, total: calls.append((current, total)),
            )

        assert calls == [(i, 7) for i in range(1, 8)]

    def test_negative_limit_raises(self, temp_db: Path) -> None:
        with pytest.raises(ValueError), get_connection(temp_db) as conn:
            export_rules(conn, RuleRegistry(), limit=-1)
