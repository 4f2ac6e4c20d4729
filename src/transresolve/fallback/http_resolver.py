"""A fallback resolver that posts raw text to a remote resolution endpoint."""

import logging
from typing import Any

import httpx

from transresolve.config import FallbackSettings

from .base import BaseFallbackResolver, FallbackError

logger = logging.getLogger(__name__)


class HttpFallbackResolver(BaseFallbackResolver):
    """
    Resolves text through a JSON endpoint.

    Request body: `{"text": ..., "locale": ...}`.
    Expected response: `{"success": true, "data": {"resolved": "..."}}`.
    Anything else, including a non-2xx status, is a failure.
    """

    def __init__(self, settings: FallbackSettings, *, client: httpx.AsyncClient | None = None) -> None:
        """
        Initialize the HTTP resolver.

        Args:
            settings: Fallback settings; `endpoint` is required.
            client: Optional pre-built client, mainly for tests. A client
                created here is closed by `aclose()`.

        Raises:
            ValueError: If no endpoint is configured.

        """
        super().__init__(settings)
        if not self.settings.endpoint:
            msg = "The 'http' fallback provider requires an 'endpoint' setting."
            raise ValueError(msg)
        self.endpoint = self.settings.endpoint
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=self.settings.timeout,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                **self.settings.headers,
            },
        )

    @staticmethod
    def _extract_resolved(payload: Any) -> str:  # noqa: ANN401
        if not isinstance(payload, dict) or payload.get("success") is not True:
            msg = "Endpoint did not report success."
            raise FallbackError(msg)
        data = payload.get("data")
        resolved = data.get("resolved") if isinstance(data, dict) else None
        if not isinstance(resolved, str) or not resolved:
            msg = "Endpoint response is missing 'data.resolved'."
            raise FallbackError(msg)
        return resolved

    async def _resolve(self, text: str, locale: str) -> str:
        """
        Post the text to the endpoint and return the resolved string.

        Raises:
            FallbackError: On a network error, non-2xx status or malformed body.

        """
        body = {"text": text, "locale": locale}
        try:
            response = await self.client.post(self.endpoint, json=body)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            msg = f"Fallback request to {self.endpoint} failed: {e}"
            raise FallbackError(msg) from e

        resolved = self._extract_resolved(payload)
        logger.debug("Endpoint resolved %d characters for locale '%s'.", len(text), locale)
        return resolved

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this resolver created it."""
        if self._owns_client:
            await self.client.aclose()
