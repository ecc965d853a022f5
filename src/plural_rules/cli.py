"""Command-line interface for plural rule lookup and export."""

import argparse
import logging
import sys
from pathlib import Path

from plural_rules.db import (
    DEFAULT_DB_PATH,
    create_export_engine,
    export_rules,
    get_connection,
    init_db,
    locale_rules,
    plural_samples,
    rules,
)
from plural_rules.registry import default_registry
from plural_rules.rules import DEFAULT_SAMPLE_LIMIT, PluralRule, describe
from plural_rules.verify import verify_database, verify_rules

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _parse_count(value: str) -> int:
    """Parse a count argument, rejecting negatives and non-integers."""
    try:
        n = int(value)
    except ValueError:
        raise ValueError(f"Count must be an integer: {value!r}") from None
    if n < 0:
        raise ValueError(f"Count must be non-negative: {n}")
    return n


def cmd_classify(args: argparse.Namespace) -> int:
    """Print the plural category of each count for a locale."""
    try:
        counts = [_parse_count(value) for value in args.counts]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rule = default_registry.resolve(args.locale)
    if args.locale not in default_registry:
        print(f"Note: no rule for {args.locale!r}, using {rule}", file=sys.stderr)

    for n in counts:
        category = rule.classify(n)
        print(f"{n}\t{category.suffix if args.suffix else category}")

    return 0


def cmd_locales(args: argparse.Namespace) -> int:
    """List the locale table."""
    table = default_registry.table
    width = max((len(locale) for locale in table), default=0)

    for locale in default_registry.locales():
        print(f"{locale:<{width}}  {table[locale]}")

    print()
    print(f"Default for other locales: {default_registry.default}")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    """Show which counts fall into which category."""
    if args.rule:
        try:
            rule = PluralRule(args.rule)
        except ValueError:
            choices = ", ".join(r.value for r in PluralRule)
            print(f"Error: Unknown rule {args.rule!r} (choose from: {choices})", file=sys.stderr)
            return 1
        selected = [rule]
    elif args.locale is not None:
        selected = [default_registry.resolve(args.locale)]
    else:
        selected = list(PluralRule)

    if args.limit < 0:
        print(f"Error: Sample limit must be non-negative, got {args.limit}", file=sys.stderr)
        return 1

    for rule in selected:
        print(f"{rule}: {describe(rule, limit=args.limit)}")

    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export the rule table and sample classifications to SQLite."""
    db_path = Path(args.database)

    print(f"Initializing database: {db_path}")
    engine = create_export_engine(db_path)
    try:
        init_db(engine)
    finally:
        engine.dispose()

    def progress(current: int, total: int) -> None:
        print(f"\r  Rules: {current}/{total}", end="")

    try:
        with get_connection(db_path) as conn:
            stats = export_rules(
                conn,
                default_registry,
                limit=args.limit,
                progress_callback=progress,
            )
    except ValueError as e:
        print(f"\nError: {e}", file=sys.stderr)
        return 1

    print()
    print("Export complete:")
    print(f"  Rules:   {stats['rules']:,}")
    print(f"  Locales: {stats['locales']:,}")
    print(f"  Samples: {stats['samples']:,}")
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Print statistics for an exported database."""
    from sqlalchemy import func, select

    db_path = Path(args.database)

    if not db_path.exists():
        print(f"Error: Database not found: {db_path}", file=sys.stderr)
        return 1

    with get_connection(db_path) as conn:
        n_rules = conn.execute(select(func.count()).select_from(rules)).scalar() or 0
        n_locales = conn.execute(select(func.count()).select_from(locale_rules)).scalar() or 0
        n_samples = conn.execute(select(func.count()).select_from(plural_samples)).scalar() or 0

        by_category = conn.execute(
            select(plural_samples.c.category, func.count())
            .group_by(plural_samples.c.category)
            .order_by(plural_samples.c.category)
        ).fetchall()

        by_rule = conn.execute(
            select(locale_rules.c.rule, func.count())
            .group_by(locale_rules.c.rule)
            .order_by(locale_rules.c.rule)
        ).fetchall()

    print(f"Database: {db_path}")
    print(f"  Rules:   {n_rules:,}")
    print(f"  Locales: {n_locales:,}")
    print(f"  Samples: {n_samples:,}")

    if by_category:
        print()
        print("Samples by category:")
        for category, count in by_category:
            print(f"  {category:<6} {count:,}")

    if by_rule:
        print()
        print("Locales by rule:")
        for rule, count in by_rule:
            print(f"  {rule:<18} {count:,}")

    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Run rule checks, plus database checks when a database is given."""
    report = verify_rules(default_registry)
    print("Rules:")
    print(report.summary(verbose=args.verbose))

    if args.database:
        db_path = Path(args.database)
        if not db_path.exists():
            print(f"Error: Database not found: {db_path}", file=sys.stderr)
            return 1

        with get_connection(db_path) as conn:
            db_report = verify_database(conn, default_registry, verbose=args.verbose)

        print()
        print(f"Database: {db_path}")
        print(db_report.summary(verbose=args.verbose))
        if not db_report.all_passed:
            return 1

    return 0 if report.all_passed else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="plural-rules",
        description="Look up plural categories for localized UI strings",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="WARNING",
        choices=LOG_LEVELS,
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # classify subcommand
    classify_parser = subparsers.add_parser(
        "classify",
        help="Classify counts for a locale",
    )
    classify_parser.add_argument("locale", type=str, help="Locale identifier (e.g., ru, pl-PL)")
    classify_parser.add_argument("counts", nargs="+", help="Non-negative integer counts")
    classify_parser.add_argument(
        "--suffix",
        action="store_true",
        help="Print key suffixes (_one, _few, ...) instead of category names",
    )
    classify_parser.set_defaults(func=cmd_classify)

    # locales subcommand
    locales_parser = subparsers.add_parser(
        "locales",
        help="List locales with dedicated plural rules",
    )
    locales_parser.set_defaults(func=cmd_locales)

    # describe subcommand
    describe_parser = subparsers.add_parser(
        "describe",
        help="Show which counts fall into each category",
    )
    describe_parser.add_argument(
        "locale",
        type=str,
        nargs="?",
        default=None,
        help="Locale identifier (default: describe every rule)",
    )
    describe_parser.add_argument(
        "--rule",
        type=str,
        default=None,
        help="Describe a rule by name instead of by locale",
    )
    describe_parser.add_argument(
        "--limit",
        type=int,
        default=40,
        help="Highest count to sample (default: 40)",
    )
    describe_parser.set_defaults(func=cmd_describe)

    # export subcommand
    export_parser = subparsers.add_parser(
        "export",
        help="Export rules and sample classifications to SQLite",
    )
    export_parser.add_argument(
        "-d",
        "--database",
        type=str,
        default=str(DEFAULT_DB_PATH),
        help=f"Path to output SQLite database (default: {DEFAULT_DB_PATH})",
    )
    export_parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_SAMPLE_LIMIT,
        help=f"Highest count to classify per rule (default: {DEFAULT_SAMPLE_LIMIT})",
    )
    export_parser.set_defaults(func=cmd_export)

    # stats subcommand
    stats_parser = subparsers.add_parser(
        "stats",
        help="Show exported database statistics",
    )
    stats_parser.add_argument(
        "-d",
        "--database",
        type=str,
        default=str(DEFAULT_DB_PATH),
        help=f"Path to SQLite database (default: {DEFAULT_DB_PATH})",
    )
    stats_parser.set_defaults(func=cmd_stats)

    # verify subcommand
    verify_parser = subparsers.add_parser(
        "verify",
        help="Check rules, and optionally an exported database",
    )
    verify_parser.add_argument(
        "-d",
        "--database",
        type=str,
        default=None,
        help="Path to an exported SQLite database to check as well",
    )
    verify_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show failure details and metrics",
    )
    verify_parser.set_defaults(func=cmd_verify)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
