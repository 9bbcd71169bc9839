"""The single-file save format: sections joined by a separator line."""

from __future__ import annotations

import zlib
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Union

from animadb.strings_helper import language_from_code
from animadb.stringtable import ImportPolicy, StringTable

SAVE_EXTENSION = "uadb"
SEPARATOR = b"%$%$%$%$%\n"
SECTION_FILES = ("1_ST.csv", "2_EN.csv", "3_TP.json", "4_DT.json", "5_PR.csv")
PROJECT_HEADER = "###PROJECT_FOLDER###"

_TEMP_FOLDER_SUFFIX = "__TEMP__/"
_STRING_HEADER_MARK = "###"
_FIELD_SEPARATOR = '","'


def temp_folder_for(path: str) -> str:
    """Return the temporary folder used while saving or opening ``path``."""
    dot = path.rfind(".")
    if not path.endswith(SAVE_EXTENSION) or dot == -1:
        raise ValueError(f"not a .{SAVE_EXTENSION} save file: {path!r}")
    return path[:dot] + _TEMP_FOLDER_SUFFIX + path[dot + len(SAVE_EXTENSION) + 1:]


def autosave_path(path: str, moment: datetime) -> str:
    """Return the auto-save file name for ``path`` taken at ``moment``."""
    dot = path.rfind(".")
    if dot == -1:
        raise ValueError(f"save file has no extension: {path!r}")
    stamp = moment.strftime("%Y-%m-%dT%H-%M-%S")
    return f"{path[:dot]}_{stamp}{path[dot:]}"


def find_separator(data: bytes, start: int = 0) -> int:
    """Return the position of the next separator at or after ``start``, or -1."""
    return data.find(SEPARATOR, start)


def _uncompress(data: bytes) -> bytes:
    if len(data) < 4:
        raise ValueError("save data is neither plain nor compressed")
    try:
        return zlib.decompress(data[4:])
    except zlib.error as error:
        raise ValueError(f"save data cannot be uncompressed: {error}") from None


def split_sections(data: bytes) -> List[bytes]:
    """Split save file contents into their sections.

    Data that does not start with the separator is taken to be compressed
    (a 4-byte big-endian size followed by a zlib stream).
    """
    if not data.startswith(SEPARATOR):
        data = _uncompress(data)
    position = find_separator(data, 0)
    if position == -1:
        raise ValueError("save data holds no section separator")

    sections = []
    while position != -1:
        begin = position + len(SEPARATOR)
        position = find_separator(data, begin)
        sections.append(data[begin:] if position == -1 else data[begin:position])
    return sections


def join_sections(sections: Iterable[Union[bytes, str]]) -> bytes:
    """Join sections into save file contents, each preceded by the separator."""
    parts = []
    for section in sections:
        parts.append(SEPARATOR)
        parts.append(section.encode("utf-8") if isinstance(section, str) else section)
    return b"".join(parts)


def _lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _to_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        return 0


@dataclass
class ProjectInfo:
    """Project-wide settings kept in the save file."""

    attribute_prefix: str = ""
    attribute_suffix: str = ""
    auto_save: bool = False
    auto_save_interval: int = 0
    content_folder: str = ""
    asset_regexes: List[str] = field(default_factory=list)

    def to_text(self) -> str:
        """Return the project section as written in a save file."""
        lines = [
            PROJECT_HEADER,
            self.attribute_prefix,
            self.attribute_suffix,
            "1" if self.auto_save else "0",
            str(self.auto_save_interval),
            self.content_folder,
            *self.asset_regexes,
        ]
        return "".join(f"{line}\n" for line in lines)


def parse_project_info(text: str, asset_count: int) -> ProjectInfo:
    """Read a project section holding ``asset_count`` asset filters.

    Missing lines read as empty; an empty asset filter becomes ``*``.
    """
    lines = iter(_lines(text))

    def read() -> str:
        return next(lines, "")

    header = read()
    if header != PROJECT_HEADER:
        raise ValueError(f"project section starts with {header!r}")
    prefix = read()
    suffix = read()
    auto_save = read() == "1"
    interval = _to_int(read())
    folder = read()
    regexes = [read() or "*" for _ in range(asset_count)]
    return ProjectInfo(prefix, suffix, auto_save, interval, folder, regexes)


def _is_string_header(line: str) -> bool:
    return (
        len(line) >= 2 * len(_STRING_HEADER_MARK)
        and line.startswith(_STRING_HEADER_MARK)
        and line.endswith(_STRING_HEADER_MARK)
    )


def parse_string_section(text: str) -> dict:
    """Read the string section into tables, keyed and ordered by table name.

    Each block starts with a ``###LANG---Table###`` line followed by
    ``"identifier","text"`` lines; lines with an empty text are skipped.
    """
    blocks: dict = {}
    current: Optional[list] = None
    for line in _lines(text):
        if _is_string_header(line):
            separator_start = line.find("-")
            code = line[3:separator_start]
            name = line[separator_start + 3:len(line) - 3]
            language = language_from_code(code)
            current = []
            blocks.setdefault(name, {})[language] = current
            continue
        if current is not None:
            current.append(line)

    tables = {}
    for name in sorted(blocks):
        table = StringTable(name)
        for language in sorted(blocks[name]):
            for line in blocks[name][language]:
                fields = line.split(_FIELD_SEPARATOR)
                if len(fields) != 2:
                    continue
                identifier = fields[0][1:]
                value = fields[1][:-1]
                if not value:
                    continue
                table.import_string(language, identifier, value, ImportPolicy.OVERWRITE)
        tables[name] = table
    return tables


@dataclass
class EnumDefinition:
    """An enumerator read from a save file, with an optional colour per value."""

    name: str
    values: List[str] = field(default_factory=list)
    colors: List[Optional[str]] = field(default_factory=list)

    def add_value(self, value: str, color: Optional[str] = None) -> None:
        """Append ``value`` with its colour, if any."""
        self.values.append(value)
        self.colors.append(color)


def parse_enum_section(text: str) -> List[EnumDefinition]:
    """Read the enumerator section.

    A ``#Name#`` line starts an enumerator, a line without ``|`` tells whether
    colours follow (it ends with ``TRUE``), and ``value|#rrggbb`` lines give
    values. Values before the first enumerator line are ignored.
    """
    enums: List[EnumDefinition] = []
    current: Optional[EnumDefinition] = None
    use_color = False
    for line in _lines(text):
        if not line:
            continue
        if line[0] == "#":
            current = EnumDefinition(line.replace("#", ""))
            enums.append(current)
            continue
        separator = line.find("|")
        if separator < 0:
            use_color = line[-4:] == "TRUE"
            continue
        if current is None:
            continue
        current.add_value(line[:separator], line[-7:] if use_color else None)
    return enums