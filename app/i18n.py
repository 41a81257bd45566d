"""Text lookup over bundled language dictionaries."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

from app.template_render import safe_render, validate_messages
from masterdata.dot_path import flatten_keys, lookup

logger = logging.getLogger("masterdata.i18n")

LOCALES_DIR = Path(__file__).resolve().parent / "locales"
SUPPORTED_LANGUAGES = ("en", "ja")
DEFAULT_LANGUAGE = os.getenv("MASTERDATA_DEFAULT_LANGUAGE", "en").strip().lower() or "en"

_DICTIONARIES: Dict[str, dict] = {}


def load_dictionary(language: str) -> dict:
    if language in _DICTIONARIES:
        return _DICTIONARIES[language]
    path = LOCALES_DIR / f"{language}.json"
    if not path.exists():
        logger.warning("i18n_dictionary_missing language=%s path=%s", language, path)
        data: dict = {}
    else:
        data = json.loads(path.read_text(encoding="utf-8"))
    _DICTIONARIES[language] = data
    return data


def default_language() -> str:
    return DEFAULT_LANGUAGE if DEFAULT_LANGUAGE in SUPPORTED_LANGUAGES else "en"


def check_dictionary(dictionary: dict) -> list[dict]:
    messages = [(key, lookup(dictionary, key)) for key in flatten_keys(dictionary)]
    return validate_messages((key, text) for key, text in messages if isinstance(text, str))


class Translator:
    def __init__(self, language: str | None = None, dictionaries: Dict[str, dict] | None = None) -> None:
        self._dictionaries = dictionaries
        self.language = default_language()
        if language:
            self.set_language(language)

    def _dictionary(self, language: str) -> dict:
        if self._dictionaries is not None:
            return self._dictionaries.get(language) or {}
        return load_dictionary(language)

    def supported(self) -> tuple[str, ...]:
        if self._dictionaries is not None:
            return tuple(self._dictionaries.keys())
        return SUPPORTED_LANGUAGES

    def set_language(self, language: str) -> bool:
        normalized = language.strip().lower() if isinstance(language, str) else ""
        if normalized not in self.supported():
            logger.warning("i18n_language_unsupported language=%s current=%s", language, self.language)
            return False
        self.language = normalized
        return True

    def t(self, key: str, **params: Any) -> str:
        value = lookup(self._dictionary(self.language), key)
        if not isinstance(value, str):
            return key
        if params:
            return safe_render(value, params)
        return value

    __call__ = t


def translator_for(language: str | None) -> Translator:
    translator = Translator()
    if language:
        translator.set_language(language)
    return translator
