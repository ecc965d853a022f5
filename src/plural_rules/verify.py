"""Verification checks for plurality rules and exported databases.

Rule checks run in memory and confirm every rule is total, deterministic and
agrees with a list of known classifications. Database checks validate an
export written by plural_rules.db.export_rules.

Usage:
    from plural_rules.verify import verify_database, verify_rules
    from plural_rules.db import get_connection

    report = verify_rules()
    with get_connection(db_path) as conn:
        report = verify_database(conn, verbose=True)
    if not report.all_passed:
        sys.exit(1)
"""

from dataclasses import dataclass, field

from sqlalchemy import Connection, text

from plural_rules.enums import PluralCategory
from plural_rules.registry import RuleRegistry, default_registry
from plural_rules.rules import DEFAULT_SAMPLE_LIMIT, PluralRule, classify


@dataclass
class CheckResult:
    """Result of a single verification check."""

    name: str
    passed: bool
    message: str
    details: list[str] | None = None


@dataclass
class VerificationReport:
    """Check results grouped under titled sections, in the order added."""

    sections: dict[str, list[CheckResult]] = field(default_factory=dict)
    metrics: dict[str, int] = field(default_factory=dict)

    def add(self, title: str, checks: list[CheckResult]) -> None:
        self.sections.setdefault(title, []).extend(checks)

    @property
    def checks(self) -> list[CheckResult]:
        return [check for checks in self.sections.values() for check in checks]

    @property
    def failures(self) -> list[CheckResult]:
        return [check for check in self.checks if not check.passed]

    @property
    def all_passed(self) -> bool:
        return not self.failures

    def summary(self, *, verbose: bool = False) -> str:
        """Render one PASS/FAIL line per check, then an overall result line.

        With verbose, failure details (first 10) and metrics are included.
        """
        lines: list[str] = []

        for title, checks in self.sections.items():
            lines.append(f"\n{title}:")
            for check in checks:
                lines.append(f"  [{'PASS' if check.passed else 'FAIL'}] {check.message}")
                if verbose and check.details:
                    lines.extend(f"    - {d}" for d in check.details[:10])
                    if len(check.details) > 10:
                        lines.append(f"    ... and {len(check.details) - 10} more")

        if verbose and self.metrics:
            lines.append("\nMetrics:")
            lines.extend(f"  {key}: {value:,}" for key, value in self.metrics.items())

        failed = len(self.failures)
        lines.append("")
        if failed:
            lines.append(f"Result: FAILED ({failed} of {len(self.checks)} checks)")
        else:
            lines.append(f"Result: All {len(self.checks)} checks passed")

        return "\n".join(lines)


# Known classifications: (rule, count, expected category)
SPOT_CHECKS: list[tuple[PluralRule, int, PluralCategory]] = [
    (PluralRule.ONE_SINGULAR, 0, PluralCategory.OTHER),
    (PluralRule.ONE_SINGULAR, 1, PluralCategory.ONE),
    (PluralRule.ONE_SINGULAR, 2, PluralCategory.OTHER),
    (PluralRule.ZERO_ONE_SINGULAR, 0, PluralCategory.ONE),
    (PluralRule.ZERO_ONE_SINGULAR, 1, PluralCategory.ONE),
    (PluralRule.ZERO_ONE_SINGULAR, 2, PluralCategory.OTHER),
    (PluralRule.NO_SINGULAR, 0, PluralCategory.OTHER),
    (PluralRule.NO_SINGULAR, 1, PluralCategory.OTHER),
    (PluralRule.CYRILLIC, 1, PluralCategory.ONE),
    (PluralRule.CYRILLIC, 2, PluralCategory.FEW),
    (PluralRule.CYRILLIC, 5, PluralCategory.MANY),
    (PluralRule.CYRILLIC, 11, PluralCategory.MANY),
    (PluralRule.CYRILLIC, 21, PluralCategory.ONE),
    (PluralRule.CYRILLIC, 22, PluralCategory.FEW),
    (PluralRule.CYRILLIC, 25, PluralCategory.MANY),
    (PluralRule.CZECH, 1, PluralCategory.ONE),
    (PluralRule.CZECH, 3, PluralCategory.FEW),
    (PluralRule.CZECH, 5, PluralCategory.OTHER),
    (PluralRule.POLISH, 1, PluralCategory.ONE),
    (PluralRule.POLISH, 2, PluralCategory.FEW),
    (PluralRule.POLISH, 5, PluralCategory.MANY),
    (PluralRule.POLISH, 12, PluralCategory.MANY),
    (PluralRule.POLISH, 22, PluralCategory.FEW),
    (PluralRule.ROMANIAN, 0, PluralCategory.FEW),
    (PluralRule.ROMANIAN, 1, PluralCategory.ONE),
    (PluralRule.ROMANIAN, 12, PluralCategory.FEW),
    (PluralRule.ROMANIAN, 20, PluralCategory.OTHER),
    (PluralRule.ROMANIAN, 101, PluralCategory.FEW),
]

# Identifiers that must fall back to the default rule
FALLBACK_LOCALES = ["xx-unknown", "", "en", "en-US", "ru-RU", "FR", "pl"]


# =============================================================================
# Rule Checks
# =============================================================================


def check_totality(limit: int = DEFAULT_SAMPLE_LIMIT) -> CheckResult:
    """Check that every rule returns a known category for every count 0..limit."""
    known = set(PluralCategory)
    issues: list[str] = []

    for rule in PluralRule:
        for n in range(limit + 1):
            category = classify(rule, n)
            if category not in known or category not in rule.categories:
                issues.append(f"{rule}({n}) = {category!r}")

    if not issues:
        return CheckResult(
            name="totality",
            passed=True,
            message=f"All rules classify every count in [0, {limit}]",
        )
    return CheckResult(
        name="totality",
        passed=False,
        message=f"Unclassified counts: {len(issues)}",
        details=issues[:10],
    )


def check_determinism(limit: int = DEFAULT_SAMPLE_LIMIT, repeats: int = 3) -> CheckResult:
    """Check that repeated classification of a count gives the same category."""
    issues: list[str] = []

    for rule in PluralRule:
        for n in range(limit + 1):
            results = {classify(rule, n) for _ in range(repeats)}
            if len(results) != 1:
                issues.append(f"{rule}({n}) -> {sorted(results)}")

    if not issues:
        return CheckResult(
            name="determinism",
            passed=True,
            message="Repeated classification is stable",
        )
    return CheckResult(
        name="determinism",
        passed=False,
        message=f"Unstable classifications: {len(issues)}",
        details=issues[:10],
    )


def check_fallback(
    registry: RuleRegistry = default_registry,
    limit: int = DEFAULT_SAMPLE_LIMIT,
) -> CheckResult:
    """Check that unknown locales behave exactly like the default rule."""
    issues: list[str] = []
    expected = [classify(registry.default, n) for n in range(limit + 1)]

    for locale in FALLBACK_LOCALES:
        if locale in registry:
            continue
        rule = registry.resolve(locale)
        if rule != registry.default:
            issues.append(f"{locale!r}: resolved to {rule}")
            continue
        got = [rule.classify(n) for n in range(limit + 1)]
        if got != expected:
            issues.append(f"{locale!r}: classifications differ from {registry.default}")

    if not issues:
        return CheckResult(
            name="fallback",
            passed=True,
            message=f"Unknown locales fall back to {registry.default}",
        )
    return CheckResult(
        name="fallback",
        passed=False,
        message=f"Fallback mismatches: {len(issues)} locale(s)",
        details=issues,
    )


def run_spot_checks() -> list[CheckResult]:
    """Run spot checks against known classifications."""
    results: list[CheckResult] = []

    for rule, n, expected in SPOT_CHECKS:
        got = classify(rule, n)
        results.append(
            CheckResult(
                name=f"spot_{rule}_{n}",
                passed=got == expected,
                message=f"{rule}({n}) = {got}"
                + ("" if got == expected else f" (expected {expected})"),
            )
        )

    return results


def verify_rules(
    registry: RuleRegistry = default_registry,
    limit: int = DEFAULT_SAMPLE_LIMIT,
) -> VerificationReport:
    """Run all in-memory rule checks and return a report."""
    report = VerificationReport()
    report.add(
        "Rule Checks",
        [check_totality(limit), check_determinism(limit), check_fallback(registry, limit)],
    )
    report.add("Spot Checks", run_spot_checks())
    return report


# =============================================================================
# Database Checks
# =============================================================================


def check_orphaned_locales(conn: Connection) -> CheckResult:
    """Check that every exported locale references an exported rule."""
    query = text("""
        SELECT lr.locale, lr.rule
        FROM locale_rules lr
        LEFT JOIN rules r ON lr.rule = r.name
        WHERE r.name IS NULL
    """)
    result = conn.execute(query).fetchall()

    if not result:
        return CheckResult(
            name="orphaned_locales",
            passed=True,
            message="No orphaned locale mappings",
        )
    return CheckResult(
        name="orphaned_locales",
        passed=False,
        message=f"Orphaned locale mappings: {len(result)} without rules",
        details=[f"{row.locale} -> {row.rule}" for row in result[:10]],
    )


def check_unknown_rules(conn: Connection) -> CheckResult:
    """Check that every exported rule name is a known PluralRule."""
    known = {rule.value for rule in PluralRule}
    names = [row[0] for row in conn.execute(text("SELECT name FROM rules")).fetchall()]
    unknown = [name for name in names if name not in known]

    if not unknown:
        return CheckResult(
            name="unknown_rules",
            passed=True,
            message="All exported rules are known",
        )
    return CheckResult(
        name="unknown_rules",
        passed=False,
        message=f"Unknown rules: {len(unknown)}",
        details=unknown[:10],
    )


def check_sample_agreement(conn: Connection) -> CheckResult:
    """Check that every exported sample matches the current classification."""
    known = {rule.value for rule in PluralRule}
    query = text("SELECT rule, n, category, suffix FROM plural_samples ORDER BY rule, n")
    issues: list[str] = []

    for row in conn.execute(query):
        if row.rule not in known:
            continue
        expected = classify(PluralRule(row.rule), row.n)
        if row.category != expected.value or row.suffix != expected.suffix:
            issues.append(f"{row.rule}({row.n}): {row.category} != {expected}")

    if not issues:
        return CheckResult(
            name="sample_agreement",
            passed=True,
            message="Exported samples match classification",
        )
    return CheckResult(
        name="sample_agreement",
        passed=False,
        message=f"Stale samples: {len(issues)} disagree with classification",
        details=issues[:10],
    )


def check_locale_agreement(
    conn: Connection, registry: RuleRegistry = default_registry
) -> CheckResult:
    """Check that exported locale mappings match the registry."""
    rows = conn.execute(text("SELECT locale, rule FROM locale_rules")).fetchall()
    exported = {row.locale: row.rule for row in rows}
    issues: list[str] = []

    for locale, rule in registry.table.items():
        if locale not in exported:
            issues.append(f"{locale}: missing")
        elif exported[locale] != rule.value:
            issues.append(f"{locale}: {exported[locale]} != {rule}")

    if not issues:
        return CheckResult(
            name="locale_agreement",
            passed=True,
            message=f"All {len(registry.table)} registry locales exported",
        )
    return CheckResult(
        name="locale_agreement",
        passed=False,
        message=f"Locale mismatches: {len(issues)}",
        details=issues[:10],
    )


def check_sample_coverage(conn: Connection) -> list[CheckResult]:
    """Check that every rule has exported samples."""
    results: list[CheckResult] = []
    query = text("SELECT COUNT(*) FROM plural_samples WHERE rule = :rule")

    for rule in PluralRule:
        count = conn.execute(query, {"rule": rule.value}).scalar() or 0
        results.append(
            CheckResult(
                name=f"samples_{rule}",
                passed=count > 0,
                message=f"{rule} samples: {count:,}",
            )
        )

    return results


def collect_metrics(conn: Connection) -> dict[str, int]:
    """Collect row counts for the verbose summary."""
    metrics: dict[str, int] = {}
    for table in ("rules", "locale_rules", "plural_samples"):
        metrics[table] = conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar() or 0
    return metrics


def verify_database(
    conn: Connection,
    registry: RuleRegistry = default_registry,
    *,
    verbose: bool = False,
) -> VerificationReport:
    """Run all database checks and return a complete report.

    Args:
        conn: SQLAlchemy database connection
        registry: Registry the export is compared against
        verbose: If True, collect row count metrics

    Returns:
        VerificationReport with all check results and optional metrics
    """
    report = VerificationReport()

    report.add("Integrity Checks", [check_orphaned_locales(conn), check_unknown_rules(conn)])
    report.add(
        "Consistency Checks",
        [check_sample_agreement(conn), check_locale_agreement(conn, registry)],
    )
    report.add("Coverage", check_sample_coverage(conn))

    if verbose:
        report.metrics = collect_metrics(conn)

    return report
