"""Database modules for the plural rule reference export."""

from plural_rules.db.connection import DEFAULT_DB_PATH, create_export_engine, get_connection
from plural_rules.db.export import export_rules
from plural_rules.db.schema import (
    init_db,
    locale_rules,
    metadata,
    plural_samples,
    rules,
)

__all__ = [
    "DEFAULT_DB_PATH",
    "create_export_engine",
    "export_rules",
    "get_connection",
    "init_db",
    "locale_rules",
    "metadata",
    "plural_samples",
    "rules",
]
