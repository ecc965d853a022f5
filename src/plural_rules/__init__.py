"""Plural category rules for localized UI strings.

Pick the rule for a locale, then classify counts with it:

    >>> from plural_rules import resolve
    >>> resolve("ru").classify(21)
    <PluralCategory.ONE: 'one'>
    >>> resolve("en").suffix(2)
    '_other'
"""

from plural_rules.enums import PluralCategory
from plural_rules.registry import (
    DEFAULT_RULE,
    LOCALE_RULES,
    RuleRegistry,
    default_registry,
    resolve,
)
from plural_rules.rules import PluralRule, classify, describe, sample_counts, suffix

__all__ = [
    "DEFAULT_RULE",
    "LOCALE_RULES",
    "PluralCategory",
    "PluralRule",
    "RuleRegistry",
    "classify",
    "default_registry",
    "describe",
    "resolve",
    "sample_counts",
    "suffix",
]
