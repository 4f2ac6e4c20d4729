"""
Bounded scan-and-replace over text buffers and HTML trees.

The orchestrator finds every `ct_translate(...)` pattern in a unit, resolves
each one against the dictionary, and rewrites the unit. Each pass is bounded
by ScanLimits and leaves behind only text that a later pass (or the async
fallback) may still act on.
"""

import html
import logging
from dataclasses import dataclass, field
from itertools import islice
from typing import Literal

from lxml import etree
from pydantic import BaseModel, ConfigDict, Field

from .dom import ChipPiece, TextSlot, clear_chips, insert_chips, is_within, iter_text_slots, tree_contains_marker
from .parser import DEFAULT_MAX_ARGS, DEFAULT_MAX_MATCHES, contains_marker, find_patterns
from .plural import PluralRules
from .resolver import resolve_pattern
from .scan_state import (
    UNRESOLVED_ACTIVE_REGION,
    UNRESOLVED_LIMIT,
    UNRESOLVED_UNKNOWN_KEY,
    OccurrenceStatus,
    UnresolvedReason,
)
from .types import MARKER, Dictionary, Fallback, Pattern, PatternMatch, Resolved, TextBuffer

__all__ = ["Occurrence", "Orchestrator", "RenderMode", "ScanLimits", "ScanResult"]

logger = logging.getLogger(__name__)

RenderMode = Literal["text", "chip"]


class ScanLimits(BaseModel):
    """Hard bounds for a single pass."""

    model_config = ConfigDict(frozen=True)

    max_nodes: int = Field(default=500, gt=0)
    max_replacements: int = Field(default=50, ge=0)
    max_pattern_matches: int = Field(default=DEFAULT_MAX_MATCHES, gt=0)
    max_args: int = Field(default=DEFAULT_MAX_ARGS, ge=0)


@dataclass(frozen=True)
class Occurrence:
    """What happened to one pattern occurrence during a pass."""

    raw: str
    key: str
    status: OccurrenceStatus
    unit: str
    text: str | None = None
    reason: UnresolvedReason | None = None


@dataclass
class ScanResult:
    """The outcome of one pass over a unit."""

    occurrences: list[Occurrence] = field(default_factory=list)
    nodes_visited: int = 0
    replacements: int = 0
    truncated: bool = False
    residual: list[TextSlot | TextBuffer] = field(default_factory=list)

    def count(self, status: OccurrenceStatus) -> int:
        """Return how many occurrences ended with the given status."""
        return sum(1 for occurrence in self.occurrences if occurrence.status is status)

    @property
    def changed(self) -> bool:
        """Return True if the pass rewrote anything."""
        return self.replacements > 0


@dataclass
class _Pass:
    replacements: int = 0
    truncated: bool = False
    occurrences: list[Occurrence] = field(default_factory=list)
    cache: dict[str, tuple[OccurrenceStatus, str | None, UnresolvedReason | None]] = field(default_factory=dict)


def _overlaps(span: tuple[int, int], active_span: tuple[int, int]) -> bool:
    return span[0] < active_span[1] and active_span[0] < span[1]


class Orchestrator:
    """
    Resolves every pattern in a unit against one dictionary.

    Text mode replaces each pattern with its resolved string. Chip mode (HTML
    trees only) wraps each resolved pattern in a removable chip element and
    keeps the raw pattern in the chip, so the document source is unchanged
    once chips are cleared.
    """

    def __init__(
        self,
        dictionary: Dictionary,
        *,
        limits: ScanLimits | None = None,
        mode: RenderMode = "text",
        defer_unknown_keys: bool = False,
        escape: bool = False,
        rules: PluralRules | None = None,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            dictionary: The dictionary to resolve against.
            limits: Bounds for each pass. Defaults to ScanLimits().
            mode: 'text' or 'chip'.
            defer_unknown_keys: If True, keys absent from the dictionary are left
                raw for the async fallback instead of rendering the key.
            escape: If True, string output is HTML-escaped. Trees are escaped
                by the serializer, so this does not apply to them.
            rules: Optional plural rule overrides.

        """
        if mode not in ("text", "chip"):
            msg = f"Unknown render mode '{mode}'. Expected 'text' or 'chip'."
            raise ValueError(msg)
        self.dictionary = dictionary
        self.limits = limits or ScanLimits()
        self.mode = mode
        self.defer_unknown_keys = defer_unknown_keys
        self.escape = escape
        self.rules = rules

    def _resolve(self, pattern: Pattern) -> tuple[OccurrenceStatus, str | None, UnresolvedReason | None]:
        if self.defer_unknown_keys and pattern.key not in self.dictionary:
            return OccurrenceStatus.UNRESOLVED, None, UNRESOLVED_UNKNOWN_KEY

        resolution = resolve_pattern(self.dictionary, pattern, rules=self.rules, max_args=self.limits.max_args)
        if MARKER in resolution.text:
            logger.warning("Translation for '%s' contains '%s'; rendering the key instead.", pattern.key, MARKER)
            resolution = Fallback(pattern.key)

        status = OccurrenceStatus.RESOLVED if isinstance(resolution, Resolved) else OccurrenceStatus.FALLBACK
        return status, resolution.text, None

    def _plan(
        self,
        text: str,
        unit: str,
        state: _Pass,
        active_span: tuple[int, int] | None = None,
    ) -> list[tuple[PatternMatch, str]]:
        """Decide the fate of every pattern in `text` and return the replacements to make."""
        planned: list[tuple[PatternMatch, str]] = []
        matches = find_patterns(text, max_matches=self.limits.max_pattern_matches, max_args=self.limits.max_args)

        for match in matches:
            key = match.pattern.key
            if active_span is not None and _overlaps(match.span, active_span):
                state.occurrences.append(
                    Occurrence(match.raw, key, OccurrenceStatus.UNRESOLVED, unit, reason=UNRESOLVED_ACTIVE_REGION),
                )
                continue
            if state.replacements >= self.limits.max_replacements:
                state.truncated = True
                state.occurrences.append(
                    Occurrence(match.raw, key, OccurrenceStatus.UNRESOLVED, unit, reason=UNRESOLVED_LIMIT),
                )
                continue

            if match.raw not in state.cache:
                state.cache[match.raw] = self._resolve(match.pattern)
            status, rendered, reason = state.cache[match.raw]
            state.occurrences.append(Occurrence(match.raw, key, status, unit, text=rendered, reason=reason))

            if rendered is not None:
                planned.append((match, rendered))
                state.replacements += 1
        return planned

    def _rewrite(self, text: str, planned: list[tuple[PatternMatch, str]], *, escape: bool) -> str:
        # Right to left, so earlier spans stay valid.
        for match, rendered in reversed(planned):
            replacement = html.escape(rendered) if escape else rendered
            text = text[: match.start] + replacement + text[match.end :]
        return text

    def _finish(self, state: _Pass, result: ScanResult) -> ScanResult:
        result.occurrences = state.occurrences
        result.replacements = state.replacements
        result.truncated = result.truncated or state.truncated
        if result.truncated:
            logger.info(
                "Scan stopped at its limits after %d nodes and %d replacements.",
                result.nodes_visited,
                result.replacements,
            )
        logger.debug(
            "Pass complete: %d occurrences, %d replacements, %d residual units.",
            len(result.occurrences),
            result.replacements,
            len(result.residual),
        )
        return result

    def resolve_text(self, text: str, *, active_span: tuple[int, int] | None = None) -> tuple[str, ScanResult]:
        """
        Resolve every pattern in a plain string.

        Args:
            text: The input string.
            active_span: Optional (start, end) region being edited; patterns
                overlapping it are left untouched.

        Returns:
            The rewritten string and the pass result. When markers remain, the
            result's residual list holds a TextBuffer with the output.

        """
        state = _Pass()
        result = ScanResult(nodes_visited=1)
        if not contains_marker(text):
            return text, self._finish(state, result)

        planned = self._plan(text, "text", state, active_span)
        output = self._rewrite(text, planned, escape=self.escape)
        if contains_marker(output):
            result.residual.append(TextBuffer(output))
        return output, self._finish(state, result)

    def resolve_buffer(self, buffer: TextBuffer, *, active_span: tuple[int, int] | None = None) -> ScanResult:
        """Resolve a TextBuffer in place. Residual output is reported as the buffer itself."""
        output, result = self.resolve_text(buffer.get(), active_span=active_span)
        buffer.set(output)
        if result.residual:
            result.residual = [buffer]
        return result

    def resolve_tree(self, root: etree._Element, *, active: etree._Element | None = None) -> ScanResult:
        """
        Resolve every pattern in an HTML tree in place.

        Text slots are collected in document order up to `max_nodes` before
        anything is changed, so inserting chips never disturbs the walk.

        Args:
            root: The tree to rewrite.
            active: Optional element being edited; text inside it is skipped.

        Returns:
            The pass result. Residual units are TextSlot handles.

        """
        state = _Pass()
        result = ScanResult()

        if self.mode == "chip":
            clear_chips(root)
        if not tree_contains_marker(root):
            return self._finish(state, result)

        slots = list(islice(iter_text_slots(root), self.limits.max_nodes + 1))
        if len(slots) > self.limits.max_nodes:
            result.truncated = True
            slots = slots[: self.limits.max_nodes]
        result.nodes_visited = len(slots)

        for slot in slots:
            text = slot.get()
            if MARKER not in text:
                continue
            if active is not None and is_within(slot.owner, active):
                self._plan(text, slot.name, state, active_span=(0, len(text)))
                continue

            planned = self._plan(text, slot.name, state)
            if self.mode == "chip":
                pieces = [ChipPiece(m.start, m.end, m.raw, rendered) for m, rendered in planned]
                chips = insert_chips(slot, pieces)
                candidates = [slot, *(TextSlot(chip, "tail") for chip in chips)]
            else:
                if planned:
                    slot.set(self._rewrite(text, planned, escape=False))
                candidates = [slot]
            result.residual.extend(unit for unit in candidates if MARKER in unit.get())

        return self._finish(state, result)
