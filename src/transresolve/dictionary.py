"""Loads translation dictionaries from JSON files on disk."""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .plural import normalize_locale
from .types import FORM_NAMES, Dictionary

__all__ = ["build_dictionary", "load_dictionary", "load_json_entries"]

logger = logging.getLogger(__name__)


def _coerce_entry(key: str, value: Any) -> str | dict[str, str] | None:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        forms = {str(form): template for form, template in value.items() if isinstance(template, str)}
        unknown = sorted(set(forms) - FORM_NAMES)
        if unknown:
            logger.debug("Entry '%s' has unknown form names %s; they will never be selected.", key, unknown)
        if forms:
            return forms
    logger.warning("Dropping entry '%s': expected a string or a mapping of form names to strings.", key)
    return None


def build_dictionary(raw: Mapping[str, Any], locale: str = "en") -> Dictionary:
    """
    Build a Dictionary from an already-decoded mapping.

    Entries that are neither strings nor form-maps are dropped with a warning,
    so one bad entry never breaks the rest of the dictionary.

    Args:
        raw: A mapping of translation key to entry.
        locale: The language used for plural rules.

    Returns:
        A frozen Dictionary.

    """
    entries: dict[str, str | dict[str, str]] = {}
    for key, value in raw.items():
        entry = _coerce_entry(str(key), value)
        if entry is not None:
            entries[str(key)] = entry
    return Dictionary(entries=entries, locale=normalize_locale(locale) or "en")


def load_json_entries(path: Path) -> dict[str, Any]:
    """
    Read one translation JSON file.

    Returns:
        The decoded top-level object, or an empty dict when the file is
        missing, empty, unreadable, or does not hold a JSON object.

    """
    if not path.is_file():
        logger.debug("Translation file not found: %s", path)
        return {}
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Could not read translation file %s: %s", path, e)
        return {}
    if not content.strip():
        return {}
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in translation file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Translation file %s does not contain a JSON object; ignoring it.", path)
        return {}
    return data


def load_dictionary(directory: Path, language: str, locale: str | None = None) -> Dictionary:
    """
    Load `<language>.json` and merge the optional `<locale>.json` overlay on top.

    Keys in the locale overlay replace whole entries from the language file.

    Args:
        directory: The directory holding the translation files.
        language: ISO-2 language code; also selects the plural family.
        locale: Optional locale code such as 'en_GB'.

    Returns:
        The merged Dictionary. Missing files simply contribute nothing.

    """
    iso2 = normalize_locale(language)
    if not iso2:
        logger.warning("No language configured; using an empty dictionary.")
        return Dictionary(entries={}, locale="en")

    merged = load_json_entries(directory / f"{iso2}.json")
    if locale:
        overlay = load_json_entries(directory / f"{locale}.json")
        if overlay:
            logger.debug("Merging %d entries from locale overlay '%s'.", len(overlay), locale)
            merged = {**merged, **overlay}

    dictionary = build_dictionary(merged, iso2)
    logger.info("Loaded %d translation keys for '%s'.", len(dictionary.entries), locale or iso2)
    return dictionary
