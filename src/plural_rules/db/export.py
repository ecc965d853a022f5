"""Export plurality rules and locale mappings to SQLite."""

import logging
from collections.abc import Callable

from sqlalchemy import Connection

from plural_rules.db.schema import locale_rules, plural_samples, rules
from plural_rules.registry import RuleRegistry, default_registry
from plural_rules.rules import DEFAULT_SAMPLE_LIMIT, PluralRule, classify, describe

logger = logging.getLogger(__name__)


def _clear_tables(conn: Connection) -> None:
    """Delete previous export content, children before parents."""
    conn.execute(plural_samples.delete())
    conn.execute(locale_rules.delete())
    conn.execute(rules.delete())


def export_rules(
    conn: Connection,
    registry: RuleRegistry = default_registry,
    *,
    limit: int = DEFAULT_SAMPLE_LIMIT,
    progress_callback: Callable[[int, int], None] | None = None,
) -> dict[str, int]:
    """Write every rule, every locale mapping and sample classifications.

    Existing content is replaced, so exporting twice leaves one copy.

    Args:
        conn: SQLAlchemy connection (tables must exist, see init_db)
        registry: Registry whose locale table is exported
        limit: Highest count to classify for each rule
        progress_callback: Optional callback for progress reporting (current, total)

    Returns:
        Statistics dict with counts of rules, locales and samples written
    """
    if limit < 0:
        raise ValueError(f"Sample limit must be non-negative, got {limit}")

    stats = {"rules": 0, "locales": 0, "samples": 0}

    _clear_tables(conn)

    all_rules = list(PluralRule)
    conn.execute(
        rules.insert(),
        [
            {
                "name": rule.value,
                "categories": [category.value for category in rule.categories],
                "description": describe(rule),
            }
            for rule in all_rules
        ],
    )
    stats["rules"] = len(all_rules)

    locale_batch = [
        {"locale": locale, "rule": rule.value} for locale, rule in sorted(registry.table.items())
    ]
    if locale_batch:
        conn.execute(locale_rules.insert(), locale_batch)
    stats["locales"] = len(locale_batch)

    for idx, rule in enumerate(all_rules, 1):
        sample_batch: list[dict[str, str | int]] = []
        for n in range(limit + 1):
            category = classify(rule, n)
            sample_batch.append(
                {
                    "rule": rule.value,
                    "n": n,
                    "category": category.value,
                    "suffix": category.suffix,
                }
            )
        conn.execute(plural_samples.insert(), sample_batch)
        stats["samples"] += len(sample_batch)

        if progress_callback:
            progress_callback(idx, len(all_rules))

    logger.info(
        "Exported %d rules, %d locales, %d samples",
        stats["rules"],
        stats["locales"],
        stats["samples"],
    )
    return stats
