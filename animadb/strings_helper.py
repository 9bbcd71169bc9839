"""Language codes and identifier helpers for localised string tables."""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Callable, Optional, Protocol


class Language(IntEnum):
    """Languages a localised string can be written in."""

    FRENCH = 0
    ENGLISH = 1


_CODES = {Language.FRENCH: "FR", Language.ENGLISH: "EN"}
_NAMES = {Language.FRENCH: "Français", Language.ENGLISH: "English"}
_BANNED_CHARS = frozenset("\"'=()[]{}+-*/!?,;:#%$&<>")
_DICTIONARY_REFERENCE = re.compile(r"\$(.*?)\$")
_INTEGER = re.compile(r"\s*[+-]?[0-9]+\s*")


class StringLookup(Protocol):
    """Anything that can look up a string by identifier and language."""

    def get_string(self, key: str, language: Language) -> Optional[str]:
        ...


def language_from_code(code: str) -> Language:
    """Return the language whose two-letter code is ``code``."""
    for language, language_cd in _CODES.items():
        if language_cd == code:
            return language
    raise ValueError(f"unknown language code: {code!r}")


def language_name(language: Optional[Language]) -> str:
    """Return the display name of ``language``, or an empty string."""
    return _NAMES.get(language, "")


def language_code(language: Optional[Language]) -> str:
    """Return the two-letter code of ``language``, or an empty string."""
    return _CODES.get(language, "")


def _parse_int(text: str) -> Optional[int]:
    if _INTEGER.fullmatch(text) is None:
        return None
    return int(text)


def unique_identifier(base: str, is_free: Callable[[str], bool], accept_base: bool) -> str:
    """Build an identifier from ``base`` that ``is_free`` accepts.

    When ``accept_base`` is true and ``base`` is already free it is returned
    unchanged. Otherwise a numeric ``_N`` suffix is appended (or an existing
    numeric suffix is continued) until a free identifier is found.
    """
    if accept_base and is_free(base):
        return base

    addition = 1
    stem, separator, suffix = base.rpartition("_")
    if separator:
        number = _parse_int(suffix)
        if number is not None:
            addition = number
            base = stem

    candidate = f"{base}_{addition}"
    while not is_free(candidate):
        addition += 1
        candidate = f"{base}_{addition}"
    return candidate


def clean_identifier(identifier: str) -> str:
    """Replace spaces with underscores and drop characters unfit for identifiers."""
    return "".join(c for c in identifier.replace(" ", "_") if c not in _BANNED_CHARS)


def replace_dictionary_references(text: str, language: Language, dictionary: StringLookup) -> str:
    """Replace every ``$id$`` in ``text`` with the dictionary entry for ``id``.

    Identifiers missing from the dictionary are replaced with nothing.
    """
    result = text
    for match in _DICTIONARY_REFERENCE.finditer(text):
        value = dictionary.get_string(match.group(1), language)
        result = result.replace(match.group(0), value if value is not None else "")
    return result