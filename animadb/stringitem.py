"""A single localised string with one text per language."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from animadb.strings_helper import Language, StringLookup, replace_dictionary_references


def _empty_strings() -> list:
    return [""] * len(Language)


@dataclass(eq=False)
class StringItem:
    """An identifier with one text per language.

    Items compare and sort by identifier alone.
    """

    identifier: str
    strings: list = field(default_factory=_empty_strings)

    def __post_init__(self) -> None:
        if len(self.strings) != len(Language):
            raise ValueError(f"expected {len(Language)} strings, got {len(self.strings)}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StringItem):
            return NotImplemented
        return self.identifier == other.identifier

    def __lt__(self, other: StringItem) -> bool:
        if not isinstance(other, StringItem):
            return NotImplemented
        return self.identifier < other.identifier

    def __gt__(self, other: StringItem) -> bool:
        if not isinstance(other, StringItem):
            return NotImplemented
        return self.identifier > other.identifier

    def copy(self) -> StringItem:
        """Return an independent copy of this item."""
        return StringItem(self.identifier, list(self.strings))

    def get(self, language: Optional[Language]) -> str:
        """Return the text for ``language``; ``None`` gives the identifier."""
        if language is None:
            return self.identifier
        return self.strings[Language(language)]

    def set(self, language: Optional[Language], text: str) -> None:
        """Set the text for ``language``; ``None`` is ignored."""
        if language is None:
            return
        self.strings[Language(language)] = text

    def to_csv(self, language: Language, dictionary: Optional[StringLookup] = None) -> str:
        """Return the item as a quoted ``"id","text"`` CSV pair.

        Newlines are escaped as ``\\n``. When a dictionary is given, ``$id$``
        references in the text are replaced first.
        """
        text = self.strings[Language(language)]
        if dictionary is not None:
            text = replace_dictionary_references(text, language, dictionary)
        escaped = text.replace("\n", "\\n")
        return f'"{self.identifier}","{escaped}"'