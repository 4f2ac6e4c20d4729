"""A mock fallback resolver for testing purposes."""

import asyncio
import logging
from collections.abc import Mapping

from transresolve.config import FallbackSettings

from .base import BaseFallbackResolver, FallbackError

logger = logging.getLogger(__name__)


class MockFallbackResolver(BaseFallbackResolver):
    """
    An in-memory resolver that returns canned answers.

    Texts without a canned answer come back with a '[MOCK] ' prefix. It can be
    configured to fail a number of times, or always, to exercise retries.
    """

    def __init__(
        self,
        settings: FallbackSettings | None = None,
        *,
        responses: Mapping[str, str] | None = None,
        fail_times: int = 0,
        return_error: bool = False,
        delay: float = 0.0,
    ) -> None:
        """
        Initialize the Mock resolver.

        Args:
            settings: Fallback settings (only max_text_length is used).
            responses: Canned text → resolved mappings.
            fail_times: Number of calls that fail before calls start succeeding.
            return_error: If True, every call fails.
            delay: Seconds to wait before answering, to simulate latency.

        """
        super().__init__(settings)
        self.responses = dict(responses or {})
        self.fail_times = fail_times
        self.return_error = return_error
        self.delay = delay
        self.calls: list[tuple[str, str]] = []

    async def _resolve(self, text: str, locale: str) -> str:
        """
        Return the canned answer for the text.

        Raises:
            FallbackError: While `fail_times` is positive, or if `return_error` is set.

        """
        self.calls.append((text, locale))
        if self.delay:
            await asyncio.sleep(self.delay)

        if self.return_error or self.fail_times > 0:
            self.fail_times = max(self.fail_times - 1, 0)
            msg = "Mock fallback resolver was configured to fail."
            raise FallbackError(msg)

        resolved = self.responses.get(text, f"[MOCK] {text}")
        logger.debug("MockFallbackResolver answered call %d for locale '%s'.", len(self.calls), locale)
        return resolved
