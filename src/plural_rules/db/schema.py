"""Database schema for the plural rule reference export (SQLAlchemy Core)."""

from sqlalchemy import (
    JSON,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.engine import Engine

metadata = MetaData()

# One row per plurality rule
rules = Table(
    "rules",
    metadata,
    Column("name", String(32), primary_key=True),  # PluralRule value, e.g. 'cyrillic'
    Column("categories", JSON, nullable=False),  # ["one", "few", "many", "other"]
    Column("description", String),  # e.g. 'one = 1, 21, 31...; few = 2, 3, 4...'
)

# Exact-match locale identifiers
locale_rules = Table(
    "locale_rules",
    metadata,
    Column("locale", String(32), primary_key=True),  # case-sensitive, e.g. 'pl-PL'
    Column("rule", String(32), ForeignKey("rules.name"), nullable=False),
)

# Classification of each sampled count per rule
plural_samples = Table(
    "plural_samples",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("rule", String(32), ForeignKey("rules.name"), nullable=False),
    Column("n", Integer, nullable=False),  # the classified count
    Column("category", String(8), nullable=False),  # one, few, many, other
    Column("suffix", String(8), nullable=False),  # _one, _few, _many, _other
    UniqueConstraint("rule", "n", name="uq_plural_samples_rule_n"),
)


def init_db(engine: Engine) -> None:
    """Create all tables if they don't exist. Safe to call multiple times."""
    metadata.create_all(engine)
