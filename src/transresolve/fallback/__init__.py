"""
Async fallback resolution for text the local pass could not resolve.

Each resolver adheres to the `BaseFallbackResolver` interface and is selected
by the `fallback.provider` setting.
"""

import logging
from typing import Any

from transresolve.config import FallbackSettings

from .base import BaseFallbackResolver, FallbackError
from .client import FallbackClient
from .http_resolver import HttpFallbackResolver
from .local_resolver import LocalFallbackResolver
from .mock_resolver import MockFallbackResolver

logger = logging.getLogger(__name__)

# Central mapping from provider name to resolver class.
FALLBACK_MAPPING: dict[str, type[BaseFallbackResolver]] = {
    "http": HttpFallbackResolver,
    "local": LocalFallbackResolver,
    "mock": MockFallbackResolver,
}


def get_fallback_resolver(name: str, settings: FallbackSettings, **kwargs: Any) -> BaseFallbackResolver | None:  # noqa: ANN401
    """
    Instantiate the resolver registered under `name`.

    Args:
        name: The provider name, e.g. 'http'. 'none' disables the fallback.
        settings: The fallback settings passed to the resolver.
        **kwargs: Extra keyword arguments for the resolver's constructor.

    Returns:
        The resolver, or None for 'none' and unknown providers.

    """
    if name == "none":
        return None
    resolver_class = FALLBACK_MAPPING.get(name)
    if resolver_class is None:
        logger.warning("Unknown fallback provider '%s'. Available: %s", name, ", ".join(sorted(FALLBACK_MAPPING)))
        return None
    return resolver_class(settings, **kwargs)


def build_fallback_client(settings: FallbackSettings, **kwargs: Any) -> FallbackClient | None:  # noqa: ANN401
    """Build a FallbackClient for the configured provider, or None when disabled."""
    resolver = get_fallback_resolver(settings.provider, settings, **kwargs)
    if resolver is None:
        return None
    return FallbackClient(
        resolver,
        debounce=settings.debounce,
        retry_delay=settings.retry_delay,
        max_retries=settings.max_retries,
    )


__all__ = [
    "FALLBACK_MAPPING",
    "BaseFallbackResolver",
    "FallbackClient",
    "FallbackError",
    "HttpFallbackResolver",
    "LocalFallbackResolver",
    "MockFallbackResolver",
    "build_fallback_client",
    "get_fallback_resolver",
]
