"""
Pattern parser for `ct_translate(...)` calls embedded in free text.

Grammar, in order:

    ct_translate(  ws*  QUOTE KEY QUOTE  ws*
        [ ,  ws*  ( [ BODY ] | { BODY } )  ws*
            [ ,  ws*  ( QUOTE FORM QUOTE | DIGITS )  ws* ]
        ]
    )

KEY is `[A-Z][A-Z0-9_]*`, FORM is `[a-z]+`, BODY is everything up to the
first matching closer on the same line. The scanner is an explicit state
machine: a call that fails in any state is simply not a match, and scanning
resumes after its `ct_translate(` marker without consuming anything.
"""

import logging
from collections.abc import Iterator
from enum import Enum, auto

import regex

from .types import MARKER, CountSelector, FormSelector, Pattern, PatternMatch, Selector

__all__ = [
    "DEFAULT_MAX_ARGS",
    "DEFAULT_MAX_MATCHES",
    "contains_marker",
    "find_patterns",
    "parse_inline_args",
    "parse_patterns",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_MATCHES = 200
DEFAULT_MAX_ARGS = 50
# Marker positions examined per call, as a multiple of max_matches.
_ATTEMPT_FACTOR = 4

_QUOTES = "'\""
_CLOSERS = {"[": "]", "{": "}"}
_LINE_BREAKS = "\n\r"

_ARROW_PAIR = regex.compile(r"""['"]([A-Za-z0-9_]+)['"]\s*=>\s*(?:['"]([^'"]*)['"]|([0-9]+(?:\.[0-9]+)?))""")
_COLON_PAIR = regex.compile(r"""['"]([A-Za-z0-9_]+)['"]\s*:\s*(?:['"]([^'"]*)['"]|([0-9]+(?:\.[0-9]+)?))""")


class _State(Enum):
    KEY_OPEN = auto()
    KEY = auto()
    AFTER_KEY = auto()
    ARGS_OPEN = auto()
    ARGS_BODY = auto()
    AFTER_ARGS = auto()
    SELECTOR_OPEN = auto()
    FORM = auto()
    COUNT = auto()
    AFTER_SELECTOR = auto()


def contains_marker(text: str) -> bool:
    """Return True if the text contains at least one `ct_translate(` marker."""
    return MARKER in text


def _is_key_start(char: str) -> bool:
    return "A" <= char <= "Z"


def _is_key_char(char: str) -> bool:
    return "A" <= char <= "Z" or "0" <= char <= "9" or char == "_"


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _skip_ws(text: str, pos: int) -> int:
    length = len(text)
    while pos < length and text[pos].isspace():
        pos += 1
    return pos


def _scan_call(text: str, pos: int) -> tuple[str, str, Selector, int] | None:  # noqa: C901, PLR0912
    """
    Run the state machine over one call body starting right after the marker.

    Returns:
        (key, args_body, selector, end) for a complete call, or None.

    """
    length = len(text)
    state = _State.KEY_OPEN
    key = ""
    args_body = ""
    selector: Selector = None
    closer = ""

    while pos < length:
        if state is _State.KEY_OPEN:
            pos = _skip_ws(text, pos)
            if pos >= length or text[pos] not in _QUOTES:
                return None
            pos += 1
            state = _State.KEY

        elif state is _State.KEY:
            start = pos
            if not _is_key_start(text[pos]):
                return None
            while pos < length and _is_key_char(text[pos]):
                pos += 1
            if pos >= length or text[pos] not in _QUOTES:
                return None
            key = text[start:pos]
            pos += 1
            state = _State.AFTER_KEY

        elif state is _State.AFTER_KEY:
            pos = _skip_ws(text, pos)
            if pos >= length:
                return None
            if text[pos] == ")":
                return key, args_body, selector, pos + 1
            if text[pos] != ",":
                return None
            pos += 1
            state = _State.ARGS_OPEN

        elif state is _State.ARGS_OPEN:
            pos = _skip_ws(text, pos)
            if pos >= length or text[pos] not in _CLOSERS:
                return None
            closer = _CLOSERS[text[pos]]
            pos += 1
            state = _State.ARGS_BODY

        elif state is _State.ARGS_BODY:
            start = pos
            while pos < length and text[pos] != closer:
                if text[pos] in _LINE_BREAKS:
                    return None
                pos += 1
            if pos >= length:
                return None
            args_body = text[start:pos]
            pos += 1
            state = _State.AFTER_ARGS

        elif state is _State.AFTER_ARGS:
            pos = _skip_ws(text, pos)
            if pos >= length:
                return None
            if text[pos] == ")":
                return key, args_body, selector, pos + 1
            if text[pos] != ",":
                return None
            pos += 1
            state = _State.SELECTOR_OPEN

        elif state is _State.SELECTOR_OPEN:
            pos = _skip_ws(text, pos)
            if pos >= length:
                return None
            if text[pos] in _QUOTES:
                pos += 1
                state = _State.FORM
            elif _is_digit(text[pos]):
                state = _State.COUNT
            else:
                return None

        elif state is _State.FORM:
            start = pos
            while pos < length and "a" <= text[pos] <= "z":
                pos += 1
            if pos == start or pos >= length or text[pos] not in _QUOTES:
                return None
            selector = FormSelector(text[start:pos])
            pos += 1
            state = _State.AFTER_SELECTOR

        elif state is _State.COUNT:
            start = pos
            while pos < length and _is_digit(text[pos]):
                pos += 1
            selector = CountSelector(int(text[start:pos]))
            state = _State.AFTER_SELECTOR

        elif state is _State.AFTER_SELECTOR:
            pos = _skip_ws(text, pos)
            if pos >= length or text[pos] != ")":
                return None
            return key, args_body, selector, pos + 1

    return None


def parse_inline_args(args_str: str, *, max_args: int = DEFAULT_MAX_ARGS) -> dict[str, str]:
    """
    Parse `name: value` pairs from the text between the argument brackets.

    PHP arrow syntax (`'name' => 'value'`) is tried first; JSON colon syntax
    (`"name": "value"`) only when no arrow pair is found. Values are quoted
    strings or bare integers/decimals. Fragments that match neither form are
    ignored.

    Args:
        args_str: The raw argument body, without its brackets.
        max_args: Maximum number of pairs to keep.

    Returns:
        A mapping of placeholder name to string value.

    """
    if not args_str.strip():
        return {}

    for pair_pattern in (_ARROW_PAIR, _COLON_PAIR):
        args: dict[str, str] = {}
        for count, pair in enumerate(pair_pattern.finditer(args_str)):
            if count >= max_args:
                logger.debug("Inline argument limit (%d) reached; ignoring the rest.", max_args)
                break
            name, quoted, number = pair.groups()
            args[name] = number if number is not None else quoted
        if args:
            return args

    return {}


def find_patterns(
    text: str,
    *,
    max_matches: int = DEFAULT_MAX_MATCHES,
    max_args: int = DEFAULT_MAX_ARGS,
) -> Iterator[PatternMatch]:
    """
    Lazily yield every complete, non-overlapping pattern in the text.

    Each call starts a fresh scan, so two scans of the same text yield equal
    sequences. At most `max_matches` patterns are yielded, and at most
    `max_matches * 4` marker positions are examined.

    Args:
        text: The buffer to scan.
        max_matches: Hard cap on the number of patterns yielded.
        max_args: Hard cap on inline arguments per pattern.

    Yields:
        PatternMatch objects in text order.

    """
    if max_matches <= 0 or not contains_marker(text):
        return

    found = 0
    attempts = 0
    max_attempts = max_matches * _ATTEMPT_FACTOR
    pos = text.find(MARKER)

    while pos != -1:
        if found >= max_matches or attempts >= max_attempts:
            logger.debug("Pattern scan stopped early after %d attempts and %d matches.", attempts, found)
            return
        attempts += 1

        scanned = _scan_call(text, pos + len(MARKER))
        if scanned is None:
            pos = text.find(MARKER, pos + len(MARKER))
            continue

        key, args_body, selector, end = scanned
        pattern = Pattern(key=key, args=parse_inline_args(args_body, max_args=max_args), selector=selector)
        found += 1
        yield PatternMatch(pattern=pattern, start=pos, end=end, raw=text[pos:end])
        pos = text.find(MARKER, end)


def parse_patterns(
    text: str,
    *,
    max_matches: int = DEFAULT_MAX_MATCHES,
    max_args: int = DEFAULT_MAX_ARGS,
) -> list[PatternMatch]:
    """Return all patterns in the text as a list. See `find_patterns`."""
    return list(find_patterns(text, max_matches=max_matches, max_args=max_args))
