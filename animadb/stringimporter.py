"""Import localised strings from per-language CSV files into a string table."""

from __future__ import annotations

from os import PathLike
from pathlib import Path
from typing import Union

from animadb.strings_helper import Language
from animadb.stringtable import ImportPolicy, StringTable

PathType = Union[str, PathLike]

_FIELD_SEPARATOR = '","'


class StringImporter:
    """Collects one CSV file per language and imports them into a table.

    Each file holds a header line followed by ``"identifier","text"`` lines.
    """

    def __init__(self) -> None:
        self._files: dict = {}

    def __len__(self) -> int:
        return len(self._files)

    def register_language_file(self, language: Language, path: PathType) -> None:
        """Use ``path`` as the CSV file for ``language``, replacing any earlier one."""
        self._files[Language(language)] = Path(path)

    def import_into(
        self,
        table: StringTable,
        policy: ImportPolicy = ImportPolicy.OVERWRITE,
    ) -> int:
        """Import every registered file into ``table``; return how many texts were read.

        Files are read in language order. Badly formatted lines and lines with
        an empty text are skipped. A file that cannot be opened raises ``OSError``.
        """
        imported = 0
        for language in sorted(self._files):
            with open(self._files[language], encoding="utf-8") as stream:
                lines = (line.rstrip("\n") for line in stream)
                next(lines, None)
                for line in lines:
                    fields = line.split(_FIELD_SEPARATOR)
                    if len(fields) != 2:
                        continue
                    identifier = fields[0][1:]
                    text = fields[1][:-1]
                    if not text:
                        continue
                    table.import_string(language, identifier, text, policy)
                    imported += 1
        return imported