import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
for path in (ROOT, SRC):
    if path not in sys.path:
        sys.path.insert(0, path)

from app.i18n import SUPPORTED_LANGUAGES, Translator, check_dictionary, load_dictionary, translator_for
from app.template_render import render_message, safe_render
from masterdata.dot_path import flatten_keys


class TestTranslator(unittest.TestCase):
    def test_resolves_dotted_keys(self) -> None:
        t = Translator("en")
        self.assertEqual(t("addClient.errors.emailInvalid"), "Enter a valid email address.")
        self.assertEqual(t.t("settings.college.errors.locationRequired"), "Location is required.")

    def test_missing_or_section_key_returns_key(self) -> None:
        t = Translator("en")
        self.assertEqual(t("addClient.errors.nope"), "addClient.errors.nope")
        self.assertEqual(t("settings.college"), "settings.college")

    def test_params_are_interpolated(self) -> None:
        t = Translator("en")
        self.assertEqual(t("validation.required", label="Name"), "Name is required.")
        self.assertEqual(t("pagination.summary", start=1, end=5, total=12), "Showing 1 to 5 of 12")

    def test_japanese(self) -> None:
        t = Translator("ja")
        self.assertEqual(t("common.save"), "保存")
        self.assertEqual(t("pagination.summary", start=1, end=5, total=12), "12件中 1〜5件を表示")

    def test_unsupported_language_is_ignored(self) -> None:
        t = Translator("en")
        with self.assertLogs("masterdata.i18n", level="WARNING"):
            self.assertFalse(t.set_language("fr"))
        self.assertEqual(t.language, "en")
        self.assertTrue(t.set_language(" JA "))
        self.assertEqual(t.language, "ja")

    def test_translator_for_falls_back(self) -> None:
        self.assertEqual(translator_for(None).language, "en")
        self.assertEqual(translator_for("ja").language, "ja")
        with self.assertLogs("masterdata.i18n", level="WARNING"):
            self.assertEqual(translator_for("xx").language, "en")

    def test_injected_dictionaries(self) -> None:
        t = Translator("en", dictionaries={"en": {"a": {"b": "Hello {{ who }}"}}, "de": {"a": {"b": "Hallo {{ who }}"}}})
        self.assertEqual(t.supported(), ("en", "de"))
        self.assertEqual(t("a.b", who="Ada"), "Hello Ada")
        t.set_language("de")
        self.assertEqual(t("a.b", who="Ada"), "Hallo Ada")

    def test_bundled_dictionaries_are_clean_and_aligned(self) -> None:
        en = load_dictionary("en")
        for language in SUPPORTED_LANGUAGES:
            dictionary = load_dictionary(language)
            self.assertEqual(check_dictionary(dictionary), [], language)
            self.assertEqual(sorted(flatten_keys(dictionary)), sorted(flatten_keys(en)), language)

    def test_check_dictionary_reports_broken_templates(self) -> None:
        issues = check_dictionary({"ok": "{{ label }} fine", "nested": {"bad": "{{ label "}})
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0]["key"], "nested.bad")


class TestTemplateRender(unittest.TestCase):
    def test_plain_text_passes_through(self) -> None:
        self.assertEqual(render_message("No placeholders", {"x": 1}), "No placeholders")
        self.assertEqual(render_message(None), "")

    def test_sandbox_blocks_attribute_access(self) -> None:
        self.assertEqual(safe_render("{{ label.__class__ }}", {"label": "x"}), "")

    def test_safe_render_falls_back_on_syntax_error(self) -> None:
        self.assertEqual(safe_render("{{ broken", {"broken": 1}), "{{ broken")


if __name__ == "__main__":
    unittest.main()
