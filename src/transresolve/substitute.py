"""Placeholder substitution for `##name##` tokens."""

from collections.abc import Mapping
from typing import Any

import regex

from .parser import DEFAULT_MAX_ARGS

__all__ = ["PLACEHOLDER_PATTERN", "substitute_placeholders"]

PLACEHOLDER_PATTERN = regex.compile(r"##([A-Za-z0-9_]+)##")


def substitute_placeholders(
    template: str,
    args: Mapping[str, Any] | None = None,
    *,
    max_args: int = DEFAULT_MAX_ARGS,
) -> str:
    """
    Replace `##name##` tokens with argument values and drop unknown tokens.

    The template is scanned once, left to right. Substituted values are never
    rescanned, so a value that itself contains `##x##` is emitted verbatim.

    Args:
        template: The chosen dictionary template.
        args: Placeholder values. Non-string values are passed through `str()`.
        max_args: Only the first `max_args` arguments are honoured.

    Returns:
        The substituted string.

    """
    if "##" not in template:
        return template

    values: dict[str, str] = {}
    for name, value in list((args or {}).items())[:max_args]:
        values[str(name)] = str(value)

    return PLACEHOLDER_PATTERN.sub(lambda m: values.get(m.group(1), ""), template)
