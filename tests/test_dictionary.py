"""Tests for loading dictionaries from JSON files."""

import json
import unittest
from pathlib import Path

from pyfakefs.fake_filesystem_unittest import TestCase  # type: ignore[import-not-found]

from transresolve.dictionary import build_dictionary, load_dictionary, load_json_entries

TRANSLATIONS = Path("/project/translations")


class TestBuildDictionary(unittest.TestCase):
    """Test suite for building a Dictionary from decoded JSON."""

    def test_valid_entries_are_kept(self) -> None:
        """1. Success: Strings and form-maps are kept as they are."""
        dictionary = build_dictionary({"A": "a", "B": {"one": "b", "other": "bs"}}, "de")
        assert dictionary.entries == {"A": "a", "B": {"one": "b", "other": "bs"}}
        assert dictionary.locale == "de"

    def test_invalid_entries_are_dropped(self) -> None:
        """2. Tolerance: Lists, numbers and empty maps are dropped with a warning."""
        with self.assertLogs("transresolve.dictionary", level="WARNING") as logs:
            dictionary = build_dictionary({"A": "a", "LIST": ["x"], "NUM": 3, "EMPTY": {"one": 1}})
        assert dictionary.keys() == ["A"]
        assert len(logs.records) == 3

    def test_non_string_forms_are_filtered(self) -> None:
        """3. Tolerance: Non-string form values are removed from a map."""
        dictionary = build_dictionary({"K": {"one": "x", "other": None}})
        assert dictionary.get("K") == {"one": "x"}

    def test_locale_is_normalized(self) -> None:
        """4. Locale: The plural locale is reduced to its lowercase language part."""
        assert build_dictionary({}, "PT_br").locale == "pt"
        assert build_dictionary({}, "").locale == "en"


class TestLoadDictionary(TestCase):
    """Test suite for loading language files and locale overlays."""

    def setUp(self) -> None:
        """Set up the fake filesystem."""
        self.setUpPyfakefs()

    def _write(self, name: str, data: object) -> None:
        self.fs.create_file(TRANSLATIONS / name, contents=json.dumps(data))

    def test_language_file_only(self) -> None:
        """1. Success: The language file is loaded when there is no overlay."""
        self._write("en.json", {"GREETING": "Hello"})
        dictionary = load_dictionary(TRANSLATIONS, "en")
        assert dictionary.entries == {"GREETING": "Hello"}
        assert dictionary.locale == "en"

    def test_locale_overlay_wins(self) -> None:
        """2. Overlay: Locale entries replace whole language entries."""
        self._write("en.json", {"COLOR": "color", "ITEMS": {"one": "item", "other": "items"}, "KEEP": "kept"})
        self._write("en_GB.json", {"COLOR": "colour", "ITEMS": {"other": "things"}})
        dictionary = load_dictionary(TRANSLATIONS, "en", "en_GB")
        assert dictionary.get("COLOR") == "colour"
        assert dictionary.get("ITEMS") == {"other": "things"}
        assert dictionary.get("KEEP") == "kept"

    def test_missing_overlay_is_ignored(self) -> None:
        """3. Overlay: A configured but absent overlay file changes nothing."""
        self._write("fr.json", {"A": "a"})
        assert load_dictionary(TRANSLATIONS, "fr", "fr_CA").entries == {"A": "a"}

    def test_language_code_is_normalized(self) -> None:
        """4. Language: 'EN-us' loads en.json."""
        self._write("en.json", {"A": "a"})
        assert "A" in load_dictionary(TRANSLATIONS, "EN-us")

    def test_missing_language_file(self) -> None:
        """5. Missing: An absent language file gives an empty dictionary."""
        dictionary = load_dictionary(TRANSLATIONS, "de")
        assert dictionary.entries == {}
        assert dictionary.locale == "de"

    def test_invalid_json(self) -> None:
        """6. Malformed: Invalid JSON loads as empty, with a warning."""
        self.fs.create_file(TRANSLATIONS / "en.json", contents="{not json")
        with self.assertLogs("transresolve.dictionary", level="WARNING"):
            assert load_json_entries(TRANSLATIONS / "en.json") == {}

    def test_non_object_json(self) -> None:
        """7. Malformed: A JSON array is ignored."""
        self._write("en.json", ["A", "B"])
        with self.assertLogs("transresolve.dictionary", level="WARNING"):
            assert load_dictionary(TRANSLATIONS, "en").entries == {}

    def test_empty_file(self) -> None:
        """8. Empty: A blank file contributes nothing."""
        self.fs.create_file(TRANSLATIONS / "en.json", contents="  \n")
        assert load_json_entries(TRANSLATIONS / "en.json") == {}

    def test_empty_language(self) -> None:
        """9. Empty: No language means an empty English dictionary."""
        with self.assertLogs("transresolve.dictionary", level="WARNING"):
            dictionary = load_dictionary(TRANSLATIONS, "")
        assert dictionary.entries == {}


if __name__ == "__main__":
    unittest.main()
