"""
Debounced, cancellable scheduling of fallback resolutions.

One task runs per scope at a time. Scheduling a scope again supersedes (and
cancels) the pending task for it, so a burst of edits results in a single
request after the debounce delay.
"""

import asyncio
import logging
from collections.abc import Callable, Hashable

from .base import BaseFallbackResolver, FallbackError

__all__ = ["FallbackClient"]

logger = logging.getLogger(__name__)


class FallbackClient:
    """Runs a fallback resolver with debounce, supersede-cancel and at most one retry."""

    def __init__(
        self,
        resolver: BaseFallbackResolver,
        *,
        debounce: float = 0.3,
        retry_delay: float = 0.5,
        max_retries: int = 1,
    ) -> None:
        """
        Initialize the client.

        Args:
            resolver: The resolver that performs each attempt.
            debounce: Seconds to wait before the first attempt.
            retry_delay: Seconds to wait between a failed attempt and the retry.
            max_retries: 0 or 1.

        Raises:
            ValueError: If max_retries is not 0 or 1.

        """
        if max_retries not in (0, 1):
            msg = f"max_retries must be 0 or 1, got {max_retries}."
            raise ValueError(msg)
        self.resolver = resolver
        self.debounce = debounce
        self.retry_delay = retry_delay
        self.max_retries = max_retries
        self._tasks: dict[Hashable, asyncio.Task[str | None]] = {}

    def schedule(
        self,
        scope: Hashable,
        text: str,
        locale: str,
        apply: Callable[[str], None],
        *,
        on_retry: Callable[[Hashable], None] | None = None,
    ) -> "asyncio.Task[str | None]":
        """
        Schedule a resolution for `scope`, cancelling any pending one.

        Args:
            scope: Identifies the unit being resolved.
            text: The raw text to send.
            locale: The language to resolve for.
            apply: Called with the resolved text on success.
            on_retry: Called with the scope when a retry is scheduled.

        Returns:
            A task that yields the resolved text, or None after giving up.

        """
        self.cancel(scope)
        task = asyncio.get_running_loop().create_task(self._run(scope, text, locale, apply, on_retry))
        self._tasks[scope] = task
        task.add_done_callback(lambda done: self._forget(scope, done))
        return task

    def _forget(self, scope: Hashable, task: "asyncio.Task[str | None]") -> None:
        if self._tasks.get(scope) is task:
            del self._tasks[scope]

    async def _run(
        self,
        scope: Hashable,
        text: str,
        locale: str,
        apply: Callable[[str], None],
        on_retry: Callable[[Hashable], None] | None,
    ) -> str | None:
        await asyncio.sleep(self.debounce)
        attempts = 1 + self.max_retries

        for attempt in range(1, attempts + 1):
            try:
                resolved = await self.resolver.resolve(text, locale)
            except FallbackError as e:
                if attempt < attempts:
                    logger.warning("Fallback for %r failed (%s); retrying in %.2fs.", scope, e, self.retry_delay)
                    if on_retry is not None:
                        on_retry(scope)
                    await asyncio.sleep(self.retry_delay)
                    continue
                logger.error("Fallback for %r gave up after %d attempt(s): %s", scope, attempt, e)
                return None

            apply(resolved)
            logger.debug("Fallback for %r applied on attempt %d.", scope, attempt)
            return resolved
        return None

    def pending(self, scope: Hashable) -> bool:
        """Return True if a resolution for `scope` is still running."""
        task = self._tasks.get(scope)
        return task is not None and not task.done()

    def cancel(self, scope: Hashable) -> bool:
        """
        Cancel the pending resolution for `scope`.

        Returns:
            True if a running task was cancelled.

        """
        task = self._tasks.pop(scope, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug("Cancelled pending fallback for %r.", scope)
        return True

    def cancel_all(self) -> int:
        """Cancel every pending resolution and return how many were cancelled."""
        return sum(self.cancel(scope) for scope in list(self._tasks))

    async def aclose(self) -> None:
        """Cancel pending work, wait for it to unwind and close the resolver."""
        tasks = list(self._tasks.values())
        self.cancel_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        await self.resolver.aclose()
