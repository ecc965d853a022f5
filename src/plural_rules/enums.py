"""Plural category enumeration.

A category is the bucket a count falls into. Since StrEnum values serialize
as strings, categories can be stored in SQLite or printed without conversion.
"""

from enum import StrEnum


class PluralCategory(StrEnum):
    """Grammatical plural category returned by a rule."""

    ONE = "one"
    FEW = "few"
    MANY = "many"
    OTHER = "other"

    @property
    def suffix(self) -> str:
        """Return the string-table key suffix (e.g., '_one')."""
        return f"_{self.value}"

    @classmethod
    def from_suffix(cls, suffix: str) -> "PluralCategory":
        """Parse a key suffix such as '_few' back into a category."""
        if not suffix.startswith("_"):
            raise ValueError(f"Not a plural suffix: {suffix!r}")
        try:
            return cls(suffix[1:])
        except ValueError:
            raise ValueError(f"Not a plural suffix: {suffix!r}") from None
