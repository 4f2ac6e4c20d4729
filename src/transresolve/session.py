"""
Scan sessions: one local pass followed by the async fallback for what is left.

    IDLE → SCANNING → IDLE
    IDLE → SCANNING → AWAITING_ASYNC → IDLE
    IDLE → SCANNING → AWAITING_ASYNC → RETRY_SCHEDULED → IDLE
"""

import asyncio
import logging
from collections.abc import Hashable, Sequence

from lxml import etree

from .dom import TextSlot
from .fallback import FallbackClient
from .orchestrator import Orchestrator, ScanResult
from .scan_state import ScanState
from .types import TextBuffer

__all__ = ["ScanSession"]

logger = logging.getLogger(__name__)


class ScanSession:
    """
    Drives an Orchestrator and an optional FallbackClient through one scan lifecycle.

    Callers must not run two sessions over the same unit concurrently; a new
    run supersedes the previous run's pending fallbacks for the same units.
    """

    def __init__(
        self,
        orchestrator: Orchestrator,
        fallback_client: FallbackClient | None = None,
        locale: str | None = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            orchestrator: Performs the synchronous pass.
            fallback_client: Resolves residual units. None disables the fallback.
            locale: Locale sent with fallback requests. Defaults to the dictionary's.

        """
        self.orchestrator = orchestrator
        self.fallback_client = fallback_client
        self.locale = locale or orchestrator.dictionary.locale
        self.state = ScanState.IDLE
        self.history: list[ScanState] = [ScanState.IDLE]
        self.applied: list[TextSlot | TextBuffer] = []

    def _transition(self, state: ScanState) -> None:
        if state is self.state:
            return
        logger.debug("Scan session: %s → %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _on_retry(self, scope: Hashable) -> None:
        _ = scope
        self._transition(ScanState.RETRY_SCHEDULED)

    async def _run_fallback(self, residual: Sequence[TextSlot | TextBuffer]) -> None:
        if not residual or self.fallback_client is None:
            return

        self._transition(ScanState.AWAITING_ASYNC)

        def _applier(unit: TextSlot | TextBuffer):  # noqa: ANN202
            def _apply(resolved: str) -> None:
                unit.set(resolved)
                self.applied.append(unit)

            return _apply

        tasks = [
            self.fallback_client.schedule(unit, unit.get(), self.locale, _applier(unit), on_retry=self._on_retry)
            for unit in residual
        ]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)
        superseded = sum(1 for outcome in outcomes if isinstance(outcome, asyncio.CancelledError))
        if superseded:
            logger.debug("%d fallback request(s) were superseded by a newer scan.", superseded)

    async def run_text(self, buffer: TextBuffer, *, active_span: tuple[int, int] | None = None) -> ScanResult:
        """
        Resolve a text buffer, then send any residual text to the fallback.

        Returns:
            The result of the synchronous pass.

        """
        self._transition(ScanState.SCANNING)
        try:
            result = self.orchestrator.resolve_buffer(buffer, active_span=active_span)
            await self._run_fallback(result.residual)
        finally:
            self._transition(ScanState.IDLE)
        return result

    async def run_tree(self, root: etree._Element, *, active: etree._Element | None = None) -> ScanResult:
        """
        Resolve an HTML tree, then send each residual text slot to the fallback.

        Returns:
            The result of the synchronous pass.

        """
        self._transition(ScanState.SCANNING)
        try:
            result = self.orchestrator.resolve_tree(root, active=active)
            await self._run_fallback(result.residual)
        finally:
            self._transition(ScanState.IDLE)
        return result
