"""Dictionary resolution: pick a template for a pattern and substitute it."""

import html
import logging
from collections.abc import Mapping
from typing import Any

from .parser import DEFAULT_MAX_ARGS
from .plural import PluralRules, resolve_plural_category
from .substitute import substitute_placeholders
from .types import (
    FORM_NAMES,
    CountSelector,
    Dictionary,
    Fallback,
    FormSelector,
    Pattern,
    PluralCategory,
    Resolution,
    Resolved,
    Selector,
    TranslationEntry,
)

__all__ = ["choose_template", "resolve_entry", "resolve_pattern", "translate"]

logger = logging.getLogger(__name__)


def _category_for(locale: str, count: int, rules: PluralRules | None) -> PluralCategory:
    if rules is not None:
        return rules.resolve(locale, count)
    return resolve_plural_category(locale, count)


def choose_template(
    entry: TranslationEntry,
    locale: str,
    selector: Selector,
    *,
    rules: PluralRules | None = None,
) -> str | None:
    """
    Run the form cascade for one dictionary entry.

    Order:
        plain string → that string, whatever the selector.
        FormSelector(name) → forms[name], then forms['other'].
        CountSelector(n) → forms[category(n)], then forms['other'].
        no selector → forms['singular'], then forms['other'].

    Unknown form names go straight to 'other'; they are never read as counts.

    Returns:
        The chosen template, or None when the cascade finds nothing usable.

    """
    if isinstance(entry, str):
        return entry
    if not isinstance(entry, Mapping):
        return None

    if isinstance(selector, FormSelector):
        first = selector.name if selector.name in FORM_NAMES else None
    elif isinstance(selector, CountSelector):
        first = _category_for(locale, selector.count, rules).value
    else:
        first = "singular"

    for form in (first, "other"):
        if form is not None and form in entry:
            template = entry[form]
            return template if isinstance(template, str) else None
    return None


def resolve_entry(
    entries: Mapping[str, TranslationEntry],
    locale: str,
    pattern: Pattern,
    *,
    rules: PluralRules | None = None,
    max_args: int = DEFAULT_MAX_ARGS,
) -> Resolution:
    """
    Resolve a pattern against a raw mapping of entries.

    Returns:
        Resolved(text) when a template was found, otherwise Fallback(key).
        A fallback is never substituted.

    """
    entry = entries.get(pattern.key)
    if entry is None:
        logger.debug("Key '%s' not found in dictionary.", pattern.key)
        return Fallback(pattern.key)

    template = choose_template(entry, locale, pattern.selector, rules=rules)
    if template is None:
        logger.debug("No usable form for key '%s' with selector %r.", pattern.key, pattern.selector)
        return Fallback(pattern.key)

    return Resolved(substitute_placeholders(template, pattern.args, max_args=max_args))


def resolve_pattern(
    dictionary: Dictionary,
    pattern: Pattern,
    *,
    rules: PluralRules | None = None,
    max_args: int = DEFAULT_MAX_ARGS,
) -> Resolution:
    """Resolve a pattern against a Dictionary, using its locale for plural rules."""
    return resolve_entry(dictionary.entries, dictionary.locale, pattern, rules=rules, max_args=max_args)


def translate(
    dictionary: Dictionary,
    key: str,
    args: Mapping[str, Any] | None = None,
    selector: Selector | str | int = None,
    *,
    escape: bool = False,
    rules: PluralRules | None = None,
) -> str:
    """
    Translate a key directly, without going through pattern text.

    Args:
        dictionary: The dictionary and plural locale to use.
        key: The translation key.
        args: Placeholder values.
        selector: A selector, or a bare form name (str) or count (int).
        escape: If True, HTML-escape the final string.
        rules: Optional plural rule overrides.

    Returns:
        The resolved text, or the key when nothing matches.

    """
    if isinstance(selector, bool):
        msg = "Selector must be a form name, a count, or a selector object."
        raise TypeError(msg)
    if isinstance(selector, str):
        selector = FormSelector(selector)
    elif isinstance(selector, int):
        selector = CountSelector(selector)

    string_args = {str(name): str(value) for name, value in (args or {}).items()}
    result = resolve_pattern(dictionary, Pattern(key=key, args=string_args, selector=selector), rules=rules)
    return html.escape(result.text) if escape else result.text
