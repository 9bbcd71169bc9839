"""Text search across string tables and enumerators."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Iterator, Optional, Protocol, Sequence

from animadb.strings_helper import Language, language_code
from animadb.stringtable import StringTable


class Category(IntEnum):
    """Where a search result was found."""

    STRUCT = 0
    STRING = 1
    ENUM = 2


class NamedValues(Protocol):
    """An enumerator: a name and an ordered list of values."""

    name: str
    values: Sequence[str]


@dataclass(frozen=True)
class SearchParameter:
    """What to search for and where.

    ``languages`` lists the languages whose texts are searched in string tables.
    """

    searched: str
    in_strings: bool = False
    languages: frozenset = field(default_factory=frozenset)
    in_enums: bool = False
    case_sensitive: bool = False
    whole_word: bool = False


@dataclass(frozen=True)
class SearchResult:
    """One match, with its location and the five columns shown for it."""

    category: Category
    table_index: int
    row_index: int
    col_index: Optional[int]
    display: tuple


def _equal(a: str, b: str, case_sensitive: bool) -> bool:
    return a == b if case_sensitive else a.casefold() == b.casefold()


def matches(text: str, parameters: SearchParameter) -> bool:
    """Return whether ``text`` matches the searched string."""
    searched = parameters.searched
    if parameters.whole_word:
        return any(
            _equal(searched, word, parameters.case_sensitive)
            for word in text.split(" ")
            if word
        )
    if parameters.case_sensitive:
        return searched in text
    return searched.casefold() in text.casefold()


def search_strings(
    tables: Iterable[StringTable], parameters: SearchParameter
) -> Iterator[SearchResult]:
    """Yield matches among the texts of the selected languages."""
    languages = [language for language in Language if language in parameters.languages]
    for table_index, table in enumerate(tables):
        for row_index, item in enumerate(table):
            for language in languages:
                text = item.get(language)
                if matches(text, parameters):
                    yield SearchResult(
                        Category.STRING,
                        table_index,
                        row_index,
                        int(language),
                        ("STRING", table.name, item.identifier, language_code(language), text),
                    )


def search_enums(
    enums: Iterable[NamedValues], parameters: SearchParameter
) -> Iterator[SearchResult]:
    """Yield matches among enumerator values."""
    for table_index, enumerator in enumerate(enums):
        for row_index, value in enumerate(enumerator.values):
            if matches(value, parameters):
                yield SearchResult(
                    Category.ENUM,
                    table_index,
                    row_index,
                    None,
                    ("ENUM", enumerator.name, value, "", ""),
                )


def search(
    parameters: SearchParameter,
    string_tables: Iterable[StringTable] = (),
    enums: Iterable[NamedValues] = (),
) -> list:
    """Search strings, then enumerators, as ``parameters`` selects."""
    results = []
    if parameters.in_strings:
        results.extend(search_strings(string_tables, parameters))
    if parameters.in_enums:
        results.extend(search_enums(enums, parameters))
    return results