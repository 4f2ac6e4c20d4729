"""TransResolve: resolves embedded ct_translate() patterns against translation dictionaries."""

import importlib.metadata

from .orchestrator import Orchestrator, ScanLimits, ScanResult
from .parser import find_patterns, parse_patterns
from .plural import PluralRules, resolve_plural_category
from .resolver import resolve_pattern, translate
from .substitute import substitute_placeholders
from .types import CountSelector, Dictionary, Fallback, FormSelector, Pattern, PluralCategory, Resolved


def _get_version() -> str:
    """
    Retrieve the package version from metadata.

    Returns:
        The version string, or a development version if not installed.

    """
    try:
        return importlib.metadata.version("TransResolve")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0-dev"


__version__ = _get_version()

__all__ = [
    "CountSelector",
    "Dictionary",
    "Fallback",
    "FormSelector",
    "Orchestrator",
    "Pattern",
    "PluralCategory",
    "PluralRules",
    "Resolved",
    "ScanLimits",
    "ScanResult",
    "__version__",
    "find_patterns",
    "parse_patterns",
    "resolve_pattern",
    "resolve_plural_category",
    "substitute_placeholders",
    "translate",
]
