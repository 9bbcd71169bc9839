"""A named, ordered table of localised string items."""

from __future__ import annotations

from enum import IntEnum
from typing import Callable, Iterable, Iterator, Optional, Sequence, TextIO, Union

from animadb.stringitem import StringItem
from animadb.strings_helper import Language, StringLookup, clean_identifier, unique_identifier

Key = Union[int, str]


class ImportPolicy(IntEnum):
    """What to do when an imported string would replace an existing text."""

    OVERWRITE = 0
    KEEP_EXISTING = 1
    NEW_ROW = 2


class StringTable:
    """An ordered list of string items with unique identifiers.

    ``on_change`` is called after every modification.
    """

    def __init__(
        self,
        name: str,
        items: Optional[Iterable[StringItem]] = None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.name = name
        self.items: list = [item.copy() for item in items] if items is not None else []
        self.on_change = on_change

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[StringItem]:
        return iter(self.items)

    def copy(self) -> StringTable:
        """Return a table with the same name and copies of all items."""
        return StringTable(self.name, self.items, self.on_change)

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    def _resolve(self, key: Key) -> Optional[int]:
        if isinstance(key, str):
            return self.index_of(key)
        if 0 <= key < len(self.items):
            return key
        return None

    def index_of(self, identifier: str) -> Optional[int]:
        """Return the position of ``identifier``, or ``None``."""
        return next(
            (i for i, item in enumerate(self.items) if item.identifier == identifier),
            None,
        )

    def get_string(self, key: Key, language: Optional[Language]) -> Optional[str]:
        """Return the text of the item at ``key`` (index or identifier)."""
        index = self._resolve(key)
        if index is None:
            return None
        return self.items[index].get(language)

    def get_item(self, key: Key) -> Optional[StringItem]:
        """Return the item at ``key`` (index or identifier), or ``None``."""
        index = self._resolve(key)
        return None if index is None else self.items[index]

    def set_name(self, name: str, dictionary_name: Optional[str] = None) -> str:
        """Rename the table and return the name actually used.

        A name equal to ``dictionary_name`` gets ``_1`` appended; pass ``None``
        when this table is itself the dictionary.
        """
        if dictionary_name is not None and dictionary_name == name:
            name += "_1"
        self.name = clean_identifier(name)
        return self.name

    def resize(self, count: int) -> None:
        """Add or remove items until the table holds ``count`` of them."""
        if count < 0:
            raise ValueError(f"item count cannot be negative: {count}")
        original = len(self.items)
        while len(self.items) < count:
            self.add_item(original)
        while len(self.items) > count:
            self.remove_item(count)

    def _is_free(self, identifier: str) -> bool:
        return self.index_of(identifier) is None

    def add_item(self, index: int = -1, wanted_identifier: Optional[str] = None) -> str:
        """Insert a new empty item and return its identifier.

        An index out of range appends. The wanted identifier is used when it
        is free; otherwise a unique one is derived from it or the table name.
        """
        if not 0 <= index <= len(self.items):
            index = len(self.items)

        if wanted_identifier is not None and self._is_free(wanted_identifier):
            identifier = wanted_identifier
        else:
            base = wanted_identifier if wanted_identifier is not None else self.name
            identifier = unique_identifier(base, self._is_free, False)

        self.items.insert(index, StringItem(identifier))
        self._changed()
        return identifier

    def add_item_with_texts(
        self,
        index: int,
        texts: Sequence[str],
        wanted_identifier: Optional[str] = None,
    ) -> str:
        """Insert a new item holding ``texts``, one per language, in order."""
        identifier = self.add_item(index, wanted_identifier)
        item = self.get_item(identifier)
        for language, text in zip(Language, texts):
            item.set(language, text)
        return identifier

    def add_item_copy(self, index: int, item: StringItem) -> str:
        """Insert a copy of ``item``, renamed if its identifier is taken."""
        if not 0 <= index <= len(self.items):
            index = len(self.items)
        identifier = unique_identifier(item.identifier, self._is_free, True)
        duplicate = item.copy()
        duplicate.identifier = identifier
        self.items.insert(index, duplicate)
        self._changed()
        return identifier

    def remove_item(self, key: Key) -> None:
        """Remove the item at ``key``; unknown keys are ignored."""
        index = self._resolve(key)
        if index is None:
            return
        del self.items[index]
        self._changed()

    def _valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.items)

    def swap_items(self, first: int, second: int) -> None:
        """Exchange two items; invalid or equal positions are ignored."""
        if first == second or not self._valid_index(first) or not self._valid_index(second):
            return
        self.items[first], self.items[second] = self.items[second], self.items[first]
        self._changed()

    def move_item(self, source: int, target: int) -> None:
        """Move one item to another position; invalid positions are ignored."""
        if source == target or not self._valid_index(source) or not self._valid_index(target):
            return
        self.items.insert(target, self.items.pop(source))
        self._changed()

    def sort_items(self, ascending: bool = True) -> None:
        """Sort the items by identifier."""
        self.items.sort(key=lambda item: item.identifier, reverse=not ascending)
        self._changed()

    def set_item_identifier(self, index: int, identifier: str) -> bool:
        """Rename an item; return whether the identifier is now in place."""
        if not identifier or not self._valid_index(index):
            return False
        if self.items[index].identifier == identifier:
            return True
        if any(
            item.identifier == identifier for i, item in enumerate(self.items) if i != index
        ):
            return False
        self.items[index].identifier = identifier
        self._changed()
        return True

    def set_item_string(self, row: int, language: Language, text: str) -> None:
        """Set the text of the item at ``row`` for ``language``."""
        try:
            language = Language(language)
        except ValueError:
            raise ValueError(f"invalid language: {language!r}") from None
        if not self._valid_index(row):
            raise IndexError(f"invalid item row: {row}")
        self.items[row].set(language, text)
        self._changed()

    def import_string(
        self,
        language: Language,
        identifier: str,
        text: str,
        policy: ImportPolicy = ImportPolicy.OVERWRITE,
    ) -> None:
        """Import one text, following ``policy`` when a text already exists.

        Escaped ``\\n`` sequences in ``text`` become real newlines.
        """
        policy = ImportPolicy(policy)
        value = text.replace("\\n", "\n")
        index = self.index_of(identifier)
        if index is None:
            self.add_item(-1, identifier)
            index = len(self.items) - 1
        elif self.items[index].get(language):
            if policy is ImportPolicy.KEEP_EXISTING:
                return
            if policy is ImportPolicy.NEW_ROW:
                self.add_item(-1, identifier)
                index = len(self.items) - 1
        self.items[index].set(language, value)
        self._changed()

    def write_csv(
        self,
        stream: TextIO,
        language: Language,
        dictionary: Optional[StringLookup] = None,
    ) -> None:
        """Write every item as a CSV line, each preceded by a newline."""
        for item in self.items:
            stream.write("\n")
            stream.write(item.to_csv(language, dictionary))