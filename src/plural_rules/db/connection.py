"""SQLite engine and connection handling for exports.

An export is a short, one-shot job, so nothing is pooled or cached: each
engine opens a fresh DB-API connection per checkout and closes it on
release, and get_connection disposes its engine on exit.
"""

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import Connection, Engine, create_engine, event
from sqlalchemy.pool import ConnectionPoolEntry, NullPool

DEFAULT_DB_PATH = Path("plurals.db")


def _enable_foreign_keys(dbapi_connection: Any, _connection_record: ConnectionPoolEntry) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_export_engine(db_path: Path | str = DEFAULT_DB_PATH) -> Engine:
    """Create an unpooled SQLite engine with foreign keys enforced.

    The caller owns the engine and should dispose() it when done.
    """
    engine = create_engine(f"sqlite:///{Path(db_path)}", poolclass=NullPool)
    event.listen(engine, "connect", _enable_foreign_keys)
    return engine


@contextmanager
def get_connection(db_path: Path | str = DEFAULT_DB_PATH) -> Generator[Connection]:
    """Open a connection in its own transaction, then release everything.

    Commits on success, rolls back and re-raises on exception. The engine is
    disposed on exit, so no DB-API connection outlives the block.

    Example:
        with get_connection("plurals.db") as conn:
            rows = conn.execute(select(locale_rules)).fetchall()
    """
    engine = create_export_engine(db_path)
    try:
        with engine.begin() as conn:
            yield conn
    finally:
        engine.dispose()
