"""
CLDR-style plural category resolution.

Maps a language code and a cardinal count to one of the plural categories
zero, one, two, few, many, other. Every family is pure integer arithmetic so
that every runtime computes the same category for the same input.
"""

import logging
from collections.abc import Callable
from typing import Final

from .types import PluralCategory

__all__ = [
    "FAMILY_MAP",
    "MAX_CUSTOM_RULES",
    "PluralRules",
    "normalize_locale",
    "resolve_plural_category",
]

logger = logging.getLogger(__name__)

MAX_CUSTOM_RULES: Final[int] = 50

PluralRule = Callable[[int], PluralCategory]

# Languages not listed here use the Germanic rule.
FAMILY_MAP: Final[dict[str, str]] = {
    **dict.fromkeys(("ja", "zh", "ko", "tr", "vi", "th", "id", "ms"), "no_plural"),
    **dict.fromkeys(("fr", "hi", "fa"), "french"),
    **dict.fromkeys(("sr", "ru", "uk", "be", "hr", "bs"), "east_slavic"),
    **dict.fromkeys(("cs", "sk"), "west_slavic"),
    "pl": "polish",
    "ar": "arabic",
}


def normalize_locale(locale: str) -> str:
    """
    Reduce a locale code to its lowercase language part.

    Examples:
        >>> normalize_locale("en_GB")
        'en'
        >>> normalize_locale("PT-br")
        'pt'

    """
    return locale.strip().replace("-", "_").split("_", 1)[0].lower()


def _rule_germanic(n: int) -> PluralCategory:
    return PluralCategory.ONE if n == 1 else PluralCategory.OTHER


def _rule_no_plural(n: int) -> PluralCategory:
    _ = n
    return PluralCategory.OTHER


def _rule_french(n: int) -> PluralCategory:
    return PluralCategory.ONE if n <= 1 else PluralCategory.OTHER


def _rule_east_slavic(n: int) -> PluralCategory:
    mod10 = n % 10
    mod100 = n % 100
    if mod10 == 1 and mod100 != 11:
        return PluralCategory.ONE
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return PluralCategory.FEW
    return PluralCategory.OTHER


def _rule_west_slavic(n: int) -> PluralCategory:
    if n == 1:
        return PluralCategory.ONE
    if 2 <= n <= 4:
        return PluralCategory.FEW
    return PluralCategory.OTHER


def _rule_polish(n: int) -> PluralCategory:
    if n == 1:
        return PluralCategory.ONE
    mod10 = n % 10
    mod100 = n % 100
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return PluralCategory.FEW
    return PluralCategory.MANY


def _rule_arabic(n: int) -> PluralCategory:
    if n == 0:
        return PluralCategory.ZERO
    if n == 1:
        return PluralCategory.ONE
    if n == 2:
        return PluralCategory.TWO
    mod100 = n % 100
    if 3 <= mod100 <= 10:
        return PluralCategory.FEW
    if 11 <= mod100 <= 99:
        return PluralCategory.MANY
    return PluralCategory.OTHER


_FAMILY_RULES: Final[dict[str, PluralRule]] = {
    "germanic": _rule_germanic,
    "no_plural": _rule_no_plural,
    "french": _rule_french,
    "east_slavic": _rule_east_slavic,
    "west_slavic": _rule_west_slavic,
    "polish": _rule_polish,
    "arabic": _rule_arabic,
}


def resolve_plural_category(locale: str, n: int) -> PluralCategory:
    """
    Resolve the plural category for a language and a count.

    Args:
        locale: An ISO-2 language code; region suffixes are ignored.
        n: The count. Negative values use their absolute value.

    Returns:
        The PluralCategory for the count. An empty or unlisted locale uses
        the Germanic rule.

    """
    family = FAMILY_MAP.get(normalize_locale(locale), "germanic")
    return _FAMILY_RULES[family](abs(n))


class PluralRules:
    """
    A plural resolver with optional per-language overrides.

    Overrides live on the instance, so two renderers can use different rule
    sets side by side. Custom rules take priority over the built-in families.
    """

    def __init__(self, max_custom_rules: int = MAX_CUSTOM_RULES) -> None:
        """
        Initialize an empty rule set.

        Args:
            max_custom_rules: Maximum number of languages that may be overridden.

        """
        self.max_custom_rules = max_custom_rules
        self._custom_rules: dict[str, PluralRule] = {}

    def register_rule(self, locale: str, rule: PluralRule) -> bool:
        """
        Register a custom rule for a language.

        Returns:
            True if registered, False if the limit is reached. Replacing an
            existing override always succeeds.

        """
        iso2 = normalize_locale(locale)
        if not iso2:
            msg = "Cannot register a plural rule for an empty locale."
            raise ValueError(msg)
        if iso2 not in self._custom_rules and len(self._custom_rules) >= self.max_custom_rules:
            logger.warning("Custom plural rule limit (%d) reached; rule for '%s' ignored.", self.max_custom_rules, iso2)
            return False
        self._custom_rules[iso2] = rule
        return True

    def reset(self) -> None:
        """Remove all custom rules."""
        self._custom_rules.clear()

    def has_custom_rule(self, locale: str) -> bool:
        """Check whether a language has a custom override."""
        return normalize_locale(locale) in self._custom_rules

    def resolve(self, locale: str, n: int) -> PluralCategory:
        """Resolve a category, consulting custom rules before the built-in families."""
        iso2 = normalize_locale(locale)
        custom = self._custom_rules.get(iso2)
        if custom is not None:
            return PluralCategory(custom(abs(n)))
        return resolve_plural_category(iso2, n)
