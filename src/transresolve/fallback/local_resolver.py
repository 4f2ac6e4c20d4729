"""A fallback resolver that runs the orchestrator against dictionaries on disk."""

import logging
from collections.abc import Mapping
from pathlib import Path

from transresolve.config import FallbackSettings
from transresolve.dictionary import load_dictionary
from transresolve.orchestrator import Orchestrator, ScanLimits
from transresolve.plural import normalize_locale
from transresolve.types import Dictionary

from .base import BaseFallbackResolver, FallbackError

logger = logging.getLogger(__name__)


class LocalFallbackResolver(BaseFallbackResolver):
    """
    Resolves text in-process with a per-language dictionary.

    This is what a resolution endpoint does on the server side. Dictionaries
    are loaded once per language and kept for the lifetime of the resolver.
    """

    def __init__(
        self,
        settings: FallbackSettings | None = None,
        *,
        dictionary_dir: Path | None = None,
        dictionaries: Mapping[str, Dictionary] | None = None,
        limits: ScanLimits | None = None,
    ) -> None:
        """
        Initialize the local resolver.

        Args:
            settings: Fallback settings (only max_text_length is used).
            dictionary_dir: Directory holding `<iso2>.json` files.
            dictionaries: Pre-built dictionaries keyed by ISO-2 code.
            limits: Scan limits for each resolution.

        """
        super().__init__(settings)
        self.dictionary_dir = dictionary_dir
        self.limits = limits or ScanLimits()
        self._dictionaries = {normalize_locale(code): d for code, d in (dictionaries or {}).items()}

    def _dictionary_for(self, locale: str) -> Dictionary:
        iso2 = normalize_locale(locale)
        if iso2 in self._dictionaries:
            return self._dictionaries[iso2]
        if self.dictionary_dir is None:
            msg = f"No dictionary available for locale '{locale}'."
            raise FallbackError(msg)
        dictionary = load_dictionary(self.dictionary_dir, iso2)
        self._dictionaries[iso2] = dictionary
        return dictionary

    async def _resolve(self, text: str, locale: str) -> str:
        """
        Resolve the text with the dictionary for `locale`.

        Raises:
            FallbackError: If there is no dictionary for the locale, or nothing was resolved.

        """
        if not text:
            msg = "Text parameter is required."
            raise FallbackError(msg)
        orchestrator = Orchestrator(self._dictionary_for(locale), limits=self.limits)
        resolved, result = orchestrator.resolve_text(text)
        if not result.changed:
            msg = "No pattern could be resolved."
            raise FallbackError(msg)
        logger.debug("Local fallback made %d replacements for locale '%s'.", result.replacements, locale)
        return resolved
