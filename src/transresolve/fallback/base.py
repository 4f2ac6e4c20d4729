"""Defines the base class for all async fallback resolvers."""

import logging
from abc import ABC, abstractmethod

from transresolve.config import FallbackSettings

logger = logging.getLogger(__name__)


class FallbackError(Exception):
    """Raised by a resolver when a remote resolution attempt fails for any reason."""


class BaseFallbackResolver(ABC):
    """Abstract base class for resolvers that handle text the local pass left behind."""

    def __init__(self, settings: FallbackSettings | None = None) -> None:
        """
        Initialize the resolver with fallback settings.

        Args:
            settings: A Pydantic model containing the fallback configuration.

        """
        self.settings = settings or FallbackSettings()

    async def resolve(self, text: str, locale: str) -> str:
        """
        Resolve all patterns in a piece of raw text.

        Only the first `max_text_length` characters are handed to the backend.
        Anything past that is appended to the answer unchanged, so a long unit
        never loses its tail.

        Args:
            text: The raw text, still containing `ct_translate(` patterns.
            locale: The ISO-2 language code to resolve for.

        Returns:
            The resolved text.

        Raises:
            FallbackError: On any transport or protocol failure.

        """
        limit = self.settings.max_text_length
        head, rest = text[:limit], text[limit:]
        if rest:
            logger.warning(
                "Text of %d characters exceeds max_text_length (%d); the last %d are kept unresolved.",
                len(text),
                limit,
                len(rest),
            )
        return await self._resolve(head, locale) + rest

    @abstractmethod
    async def _resolve(self, text: str, locale: str) -> str:
        """Resolve text that already fits within `max_text_length`."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any resources held by the resolver."""
