"""Locale to plurality rule registry.

Locale identifiers are matched exactly and case-sensitively. There is no
language-family inference: "ru" maps to CYRILLIC but "ru-RU" falls back to
the default rule like any other unlisted identifier.
"""

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType

from plural_rules.rules import PluralRule

logger = logging.getLogger(__name__)

DEFAULT_RULE = PluralRule.ONE_SINGULAR

# Built-in locale table; add an entry here to support a new locale
LOCALE_RULES: Mapping[str, PluralRule] = MappingProxyType(
    {
        "fr": PluralRule.ZERO_ONE_SINGULAR,
        "hu-HU": PluralRule.NO_SINGULAR,
        "tr-TR": PluralRule.NO_SINGULAR,
        "cs-CZ": PluralRule.CZECH,
        "pl-PL": PluralRule.POLISH,
        "ro": PluralRule.ROMANIAN,
        "ru": PluralRule.CYRILLIC,
        "uk": PluralRule.CYRILLIC,
    }
)


class RuleRegistry:
    """Maps locale identifiers to plurality rules.

    The table is built on the first lookup, under a lock, and is read-only
    afterwards. Lookups after initialization take no lock. Entries naming an
    unknown rule raise ValueError from the constructor, so a registry that
    exists always resolves.

    Example:
        registry = RuleRegistry({"pt-BR": PluralRule.ZERO_ONE_SINGULAR})
        rule = registry.resolve("pt-BR")
        rule.classify(0)  # PluralCategory.ONE
    """

    def __init__(
        self,
        entries: Mapping[str, PluralRule] | None = None,
        *,
        default: PluralRule = DEFAULT_RULE,
    ) -> None:
        # Unknown rule names fail here, not on the first lookup
        self._entries = {locale: PluralRule(rule) for locale, rule in (entries or {}).items()}
        self._default = PluralRule(default)
        self._table: Mapping[str, PluralRule] | None = None
        self._lock = threading.Lock()

    @property
    def default(self) -> PluralRule:
        """Return the rule used for unknown locales."""
        return self._default

    @property
    def is_initialized(self) -> bool:
        """Return True once the locale table has been built."""
        return self._table is not None

    @property
    def table(self) -> Mapping[str, PluralRule]:
        """Return the read-only locale table, building it if needed."""
        table = self._table
        if table is None:
            table = self._build_table()
        return table

    def _build_table(self) -> Mapping[str, PluralRule]:
        with self._lock:
            # Another thread may have finished while we waited
            if self._table is not None:
                return self._table

            table = dict(LOCALE_RULES)
            table.update(self._entries)

            self._table = MappingProxyType(table)
            logger.debug("Initialized plural rule table with %d locales", len(table))
            return self._table

    def resolve(self, locale: str) -> PluralRule:
        """Return the plurality rule for ``locale``.

        Unknown identifiers (including dialects of listed languages and the
        empty string) resolve to the default rule. Never raises.
        """
        rule = self.table.get(locale)
        if rule is None:
            logger.debug("No plural rule for locale %r, using %s", locale, self._default)
            return self._default
        return rule

    def locales(self) -> list[str]:
        """Return the identifiers in the table, sorted."""
        return sorted(self.table)

    def __contains__(self, locale: object) -> bool:
        return locale in self.table


default_registry = RuleRegistry()


def resolve(locale: str) -> PluralRule:
    """Return the plurality rule for ``locale`` from the default registry."""
    return default_registry.resolve(locale)
