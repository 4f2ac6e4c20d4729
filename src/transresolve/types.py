"""Defines shared data structures and types for TransResolve."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Union

from pydantic import BaseModel, ConfigDict, Field

MARKER: Final[str] = "ct_translate("
"""Literal prefix every pattern starts with. Resolved output never contains it."""

FORM_NAMES: Final[frozenset[str]] = frozenset({"zero", "one", "two", "few", "many", "other", "singular"})
"""Keys allowed in a plural form-map, including the legacy 'singular' alias."""


class PluralCategory(str, Enum):
    """CLDR plural categories. Values double as form-map keys."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


@dataclass(frozen=True)
class FormSelector:
    """An explicit form name, e.g. the `'few'` in `ct_translate('KEY', {}, 'few')`."""

    name: str


@dataclass(frozen=True)
class CountSelector:
    """A cardinal count, e.g. the `5` in `ct_translate('KEY', {}, 5)`."""

    count: int


Selector = Union[FormSelector, CountSelector, None]

TranslationEntry = Union[str, Mapping[str, str]]


@dataclass(frozen=True)
class Pattern:
    """
    A parsed `ct_translate(...)` occurrence.

    Attributes:
        key: The translation key.
        args: Placeholder values parsed from the inline argument list.
        selector: Optional form name or count used to pick a plural form.

    """

    key: str
    args: Mapping[str, str] = field(default_factory=dict)
    selector: Selector = None


@dataclass(frozen=True)
class PatternMatch:
    """A pattern together with its exact location in the scanned buffer."""

    pattern: Pattern
    start: int
    end: int
    raw: str

    @property
    def span(self) -> tuple[int, int]:
        """Return the (start, end) span of the raw pattern text."""
        return (self.start, self.end)


@dataclass(frozen=True)
class Resolved:
    """A template chosen from the dictionary with its placeholders substituted."""

    text: str


@dataclass(frozen=True)
class Fallback:
    """No usable template was found; the raw key is shown instead."""

    key: str

    @property
    def text(self) -> str:
        """Return the literal key, which is what gets rendered."""
        return self.key


Resolution = Union[Resolved, Fallback]


class Dictionary(BaseModel):
    """
    A read-only translation dictionary plus the language used for plural rules.

    The engine never mutates a dictionary; one instance is built per request
    or page view and passed explicitly into every call.
    """

    model_config = ConfigDict(frozen=True)

    entries: dict[str, Union[str, dict[str, str]]] = Field(default_factory=dict)
    locale: str = "en"

    def __contains__(self, key: object) -> bool:
        """Check whether a key exists in the dictionary."""
        return key in self.entries

    def get(self, key: str) -> TranslationEntry | None:
        """Return the entry for a key, or None if it is absent."""
        return self.entries.get(key)

    def keys(self) -> list[str]:
        """Return all keys in sorted order."""
        return sorted(self.entries)


@dataclass(eq=False)
class TextBuffer:
    """
    A mutable holder for a plain-text unit.

    Strings are immutable, so sessions and the fallback client write results
    back through this handle.
    """

    value: str
    name: str = "text"

    def get(self) -> str:
        """Return the current text."""
        return self.value

    def set(self, value: str) -> None:
        """Replace the current text."""
        self.value = value
