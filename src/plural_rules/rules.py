"""Plural category selection for each supported plurality rule.

Every rule is a total, pure function of a non-negative integer count. The
checks for each rule run in a fixed order and the first match wins, so a
count like 21 under CYRILLIC is ONE even though its tens digit would
otherwise make it plural.

Examples:
    >>> classify(PluralRule.CYRILLIC, 22)
    <PluralCategory.FEW: 'few'>
    >>> suffix(PluralRule.ZERO_ONE_SINGULAR, 0)
    '_one'
"""

from enum import StrEnum
from typing import assert_never

from plural_rules.enums import PluralCategory

DEFAULT_SAMPLE_LIMIT = 200


class PluralRule(StrEnum):
    """Plurality rules, one per grammar family.

    - ONE_SINGULAR: 1 is singular, everything else plural (English, default)
    - ZERO_ONE_SINGULAR: 0 and 1 are singular (French)
    - NO_SINGULAR: everything is plural (Hungarian, Turkish)
    - CYRILLIC: one/few/many by last digits (Russian, Ukrainian)
    - CZECH: one/few for 1 and 2-4 (Czech, Slovak)
    - POLISH: one for 1 only, few/many by last digits (Polish)
    - ROMANIAN: few for 0 and 1-19 modulo 100 (Romanian, Moldavian)
    """

    ONE_SINGULAR = "one_singular"
    ZERO_ONE_SINGULAR = "zero_one_singular"
    NO_SINGULAR = "no_singular"
    CYRILLIC = "cyrillic"
    CZECH = "czech"
    POLISH = "polish"
    ROMANIAN = "romanian"

    @property
    def categories(self) -> tuple[PluralCategory, ...]:
        """Return the categories this rule checks, in evaluation order.

        OTHER is always last. It is unreachable for CYRILLIC and POLISH
        but stays listed as the fallback every rule ends with.
        """
        return _CATEGORIES[self]

    def classify(self, n: int) -> PluralCategory:
        """Return the plural category for count ``n`` under this rule."""
        return classify(self, n)

    def suffix(self, n: int) -> str:
        """Return the key suffix for count ``n`` under this rule."""
        return classify(self, n).suffix


_CATEGORIES: dict[PluralRule, tuple[PluralCategory, ...]] = {
    PluralRule.ONE_SINGULAR: (PluralCategory.ONE, PluralCategory.OTHER),
    PluralRule.ZERO_ONE_SINGULAR: (PluralCategory.ONE, PluralCategory.OTHER),
    PluralRule.NO_SINGULAR: (PluralCategory.OTHER,),
    PluralRule.CYRILLIC: (
        PluralCategory.ONE,
        PluralCategory.FEW,
        PluralCategory.MANY,
        PluralCategory.OTHER,
    ),
    PluralRule.CZECH: (PluralCategory.ONE, PluralCategory.FEW, PluralCategory.OTHER),
    PluralRule.POLISH: (
        PluralCategory.ONE,
        PluralCategory.FEW,
        PluralCategory.MANY,
        PluralCategory.OTHER,
    ),
    PluralRule.ROMANIAN: (PluralCategory.ONE, PluralCategory.FEW, PluralCategory.OTHER),
}


def _check_count(n: int) -> None:
    """Reject counts outside the domain of the rules."""
    # bool is an int subclass; True would silently classify as 1
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"Count must be an integer, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"Count must be non-negative, got {n}")


def _one_singular(n: int) -> PluralCategory:
    if n == 1:
        return PluralCategory.ONE
    return PluralCategory.OTHER


def _zero_one_singular(n: int) -> PluralCategory:
    if n in (0, 1):
        return PluralCategory.ONE
    return PluralCategory.OTHER


def _cyrillic(n: int) -> PluralCategory:
    """one = 1, 21, 31...; few = 2-4, 22-24...; many = 0, 5-20, 25-30..."""
    if n % 10 == 1 and n % 100 != 11:
        return PluralCategory.ONE
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return PluralCategory.FEW
    if n % 10 == 0 or 5 <= n % 10 <= 9 or 11 <= n % 100 <= 14:
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _czech(n: int) -> PluralCategory:
    """one = 1; few = 2-4; other = everything else."""
    if n == 1:
        return PluralCategory.ONE
    if 2 <= n <= 4:
        return PluralCategory.FEW
    return PluralCategory.OTHER


def _polish(n: int) -> PluralCategory:
    """one = 1; few = 2-4, 22-24...; many = 0, 5-21, 25-31..."""
    if n == 1:
        return PluralCategory.ONE
    if 2 <= n % 10 <= 4 and not 12 <= n % 100 <= 14:
        return PluralCategory.FEW
    if 0 <= n % 10 <= 1 or 5 <= n % 10 <= 9 or 12 <= n % 100 <= 14:
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _romanian(n: int) -> PluralCategory:
    """one = 1; few = 0, 2-19, 101-119...; other = everything else."""
    if n == 1:
        return PluralCategory.ONE
    if n == 0 or 1 <= n % 100 <= 19:
        return PluralCategory.FEW
    return PluralCategory.OTHER


def classify(rule: PluralRule, n: int) -> PluralCategory:
    """Return the plural category of count ``n`` under ``rule``.

    Args:
        rule: The plurality rule to apply
        n: Non-negative integer count

    Returns:
        Exactly one of ONE, FEW, MANY, OTHER

    Raises:
        TypeError: If ``n`` is not an integer
        ValueError: If ``n`` is negative
    """
    _check_count(n)

    match rule:
        case PluralRule.ONE_SINGULAR:
            return _one_singular(n)
        case PluralRule.ZERO_ONE_SINGULAR:
            return _zero_one_singular(n)
        case PluralRule.NO_SINGULAR:
            return PluralCategory.OTHER
        case PluralRule.CYRILLIC:
            return _cyrillic(n)
        case PluralRule.CZECH:
            return _czech(n)
        case PluralRule.POLISH:
            return _polish(n)
        case PluralRule.ROMANIAN:
            return _romanian(n)
        case _:
            assert_never(rule)


def suffix(rule: PluralRule, n: int) -> str:
    """Return the string-table key suffix for count ``n`` under ``rule``."""
    return classify(rule, n).suffix


def sample_counts(
    rule: PluralRule, limit: int = DEFAULT_SAMPLE_LIMIT
) -> dict[PluralCategory, list[int]]:
    """Group the counts 0..limit by the category they classify to.

    Only categories that actually occur are present. Keys follow the rule's
    evaluation order and counts within each list ascend.
    """
    if limit < 0:
        raise ValueError(f"Sample limit must be non-negative, got {limit}")

    grouped: dict[PluralCategory, list[int]] = {}
    for n in range(limit + 1):
        grouped.setdefault(classify(rule, n), []).append(n)

    return {category: grouped[category] for category in rule.categories if category in grouped}


def _format_counts(counts: list[int], shown: int) -> str:
    """Render the first few counts of a category, eliding the rest."""
    head = ", ".join(str(n) for n in counts[:shown])
    if len(counts) > shown:
        return head + "..."
    return head


def describe(rule: PluralRule, limit: int = 40, shown: int = 6) -> str:
    """Summarize which counts land in which category.

    Example:
        >>> describe(PluralRule.CZECH, limit=10)
        'one = 1; few = 2, 3, 4; other = 0, 5, 6, 7, 8, 9...'
    """
    parts = [
        f"{category} = {_format_counts(counts, shown)}"
        for category, counts in sample_counts(rule, limit).items()
    ]
    return "; ".join(parts)
