"""
Occurrence and session state management for TransResolve.

Two small state models live here:

    OccurrenceStatus (Enum) → WHAT happened to one pattern occurrence in a pass
    UnresolvedReason (Dataclass) → WHY an occurrence was left as raw text
    ScanState (Enum) → WHERE a scan session is in its lifecycle

Session transitions:
    IDLE → SCANNING → IDLE                        (everything resolved locally)
    IDLE → SCANNING → AWAITING_ASYNC → IDLE       (fallback succeeded)
    IDLE → SCANNING → AWAITING_ASYNC → RETRY_SCHEDULED → IDLE
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class OccurrenceStatus(str, Enum):
    """The outcome of one pattern occurrence within a single scan pass."""

    RESOLVED = "resolved"
    """A template was found and substituted."""

    FALLBACK = "fallback"
    """No template was usable; the key itself was rendered."""

    UNRESOLVED = "unresolved"
    """The raw pattern text was left in place for a later pass or the async fallback."""


class ScanState(str, Enum):
    """The lifecycle state of a scan session."""

    IDLE = "idle"
    SCANNING = "scanning"
    AWAITING_ASYNC = "awaiting_async"
    RETRY_SCHEDULED = "retry_scheduled"


@dataclass(frozen=True)
class UnresolvedReason:
    """
    Represents why an occurrence was left unresolved.

    Attributes:
        category: The high-level category of the reason.
        code: A machine-readable identifier for the specific reason.
        message: A human-readable explanation (optional, for logging).

    """

    category: Literal["dictionary", "limit", "editing"]
    """
    The category of the reason:
    - dictionary: the local dictionary cannot satisfy the pattern
    - limit: a scan bound was reached
    - editing: the pattern sits inside the caller's active editing region
    """

    code: str
    """Machine-readable identifier (e.g., 'unknown_key', 'max_replacements')."""

    message: str | None = None
    """Human-readable explanation for logging/debugging."""

    def __str__(self) -> str:
        """Return a human-readable representation of the reason."""
        if self.message:
            return f"{self.category}:{self.code} ({self.message})"
        return f"{self.category}:{self.code}"


UNRESOLVED_UNKNOWN_KEY = UnresolvedReason(
    category="dictionary",
    code="unknown_key",
    message="Key is absent from the local dictionary; deferred to the async fallback",
)
"""The key is missing locally and the orchestrator was told to defer such keys."""

UNRESOLVED_LIMIT = UnresolvedReason(
    category="limit",
    code="max_replacements",
    message="Replacement limit reached for this pass",
)
"""The pass already performed its maximum number of replacements."""

UNRESOLVED_ACTIVE_REGION = UnresolvedReason(
    category="editing",
    code="active_region",
    message="Pattern is inside the active editing region",
)
"""The pattern is being edited by the user and must not be replaced."""
