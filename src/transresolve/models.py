"""Defines the data models used by the file-level workflow."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from transresolve.config import TransResolveConfig
from transresolve.orchestrator import ScanResult
from transresolve.scan_state import ScanState
from transresolve.types import Dictionary


class RunMode(str, Enum):
    """What a workflow run does with the input file."""

    RESOLVE = "resolve"
    PREVIEW = "preview"


@dataclass
class RunContext:
    """A data class to hold the context for a single file run."""

    source_path: Path
    project_root: Path
    config: TransResolveConfig
    dictionary: Dictionary
    mode: RunMode = RunMode.RESOLVE
    is_html: bool = False
    output_path: Path | None = None
    output: str | None = None
    result: ScanResult | None = None
    fallback_applied: int = 0
    session_history: list[ScanState] = field(default_factory=list)
