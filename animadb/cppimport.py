"""Read structure and attribute declarations out of C++ headers and CSV rows."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Optional, Tuple


class AttributeType(Enum):
    """Kinds of attribute a structure template can hold."""

    INVALID = "Invalid"
    BOOL = "Bool"
    ENUM = "Enum"
    FLOAT = "Float"
    INT = "Int"
    SHORT_STRING = "ShortString"
    TABLE_STRING = "TableString"
    REFERENCE = "Reference"
    ARRAY = "Array"
    STRUCTURE = "Structure"
    UASSET = "UAsset"
    TEXTURE = "Texture"
    SKELETAL_MESH = "SkeletalMesh"
    STATIC_MESH = "StaticMesh"
    NIAGARA = "Niagara"
    SOUND = "Sound"
    CLASS = "Class"


class OverwritePolicy(Enum):
    """What to do when imported rows meet rows that already exist."""

    OVERWRITE = 0
    KEEP_EXISTING = 1
    NEW_ROW = 2


@dataclass(frozen=True)
class ImportContext:
    """What the database already holds that an import can refer to."""

    attribute_prefix: str = ""
    attribute_suffix: str = ""
    enum_names: frozenset = field(default_factory=frozenset)
    structure_names: frozenset = field(default_factory=frozenset)

    def has_enum(self, name: str) -> bool:
        """Return whether an enumerator called ``name`` exists."""
        return name in self.enum_names

    def has_structure(self, name: str) -> bool:
        """Return whether a structure table called ``name`` exists."""
        return name in self.structure_names


@dataclass(frozen=True)
class AttributeRepresentation:
    """An attribute declaration as read from C++ source."""

    name: str
    cpp_type: str
    db_type: AttributeType = AttributeType.INVALID
    sub_ref: str = ""
    sub_array_type: AttributeType = AttributeType.INVALID
    sub_array_ref: str = ""
    default_value: str = ""
    active: bool = True


_COMMENT_BLOCK = re.compile(r"/\*.*?\*/", re.DOTALL)
_COMMENT_LINE = re.compile(r"//.*")
_STRUCT_NAME = re.compile(r"struct\s(\S*\s)?(F\w+)(?=[\n{:]| :| \{)")
_ENUM_TYPE = re.compile(r"^E[A-Z]")
_STRUCT_TYPE = re.compile(r"^F[A-Z]")
_UPROPERTY_MACRO = re.compile(r"\bUPROPERTY\([^)]*\)")
_UPROPERTY = "UPROPERTY("
_TABLE_ROW_BASE = ": public FTableRowBase"
_STRING_TYPES = frozenset({"FName", "FString", "FText"})
_REFERENCE_SUFFIXES = ("RowName", "Row", "Name")


def decompose_csv_line(line: str, expected_count: int, remove_key: bool = False) -> list:
    """Split a ``key,"a","b"`` CSV line into its fields.

    Raises ``ValueError`` when the line has no comma or the wrong number of
    fields (the key included).
    """
    first_comma = line.find(",")
    if first_comma == -1:
        raise ValueError(f"no field separator in line: {line!r}")

    trimmed = line[:-1]
    trimmed = trimmed[:first_comma] + '",' + trimmed[first_comma + 1:]
    fields = trimmed.split('","')
    if len(fields) != expected_count:
        raise ValueError(f"expected {expected_count} fields, got {len(fields)}: {line!r}")
    return fields[1:] if remove_key else fields


def remove_comment_blocks(text: str) -> str:
    """Remove ``/* ... */`` blocks; an unterminated block cuts the rest off."""
    text = _COMMENT_BLOCK.sub("", text)
    start = text.find("/*")
    return text if start == -1 else text[:start]


def remove_comment_lines(text: str) -> str:
    """Remove ``//`` comments up to the end of each line."""
    return _COMMENT_LINE.sub("", text)


def struct_name(text: str) -> str:
    """Return the ``F``-prefixed name of the first struct declared in ``text``."""
    match = _STRUCT_NAME.search(text)
    return match.group(2) if match else ""


def bracket_content(text: str) -> str:
    """Return what lies between the first ``{`` and its matching ``}``."""
    open_index = text.find("{")
    if open_index == -1:
        return ""

    level = 1
    position = open_index + 1
    while position < len(text) and level > 0:
        char = text[position]
        if char == "{":
            level += 1
        elif char == "}":
            level -= 1
        position += 1

    if level == 0:
        return text[open_index + 1:position - 1]
    return ""


def split_structs(cpp_content: str) -> Tuple[dict, dict]:
    """Return the bodies of the ``USTRUCT`` declarations in a C++ header.

    The first mapping holds data-table row structs, the second every other
    struct; both map the struct name to its body and are ordered by name.
    """
    cleaned = cpp_content.replace("\r\n", "\n")
    cleaned = remove_comment_lines(remove_comment_blocks(cleaned))
    table_sections: dict = {}
    other_sections: dict = {}
    for section in cleaned.split("USTRUCT(")[1:]:
        target = table_sections if _TABLE_ROW_BASE in section else other_sections
        target[struct_name(section)] = bracket_content(section)
    return dict(sorted(table_sections.items())), dict(sorted(other_sections.items()))


def type_from_cpp(cpp_type: str) -> AttributeType:
    """Return the attribute type matching a C++ type name."""
    if cpp_type == "bool":
        return AttributeType.BOOL
    if cpp_type == "int":
        return AttributeType.INT
    if cpp_type == "float":
        return AttributeType.FLOAT
    if cpp_type in _STRING_TYPES:
        return AttributeType.SHORT_STRING
    if cpp_type == "FStringId":
        return AttributeType.TABLE_STRING
    if cpp_type.startswith("TArray<"):
        return AttributeType.ARRAY
    if cpp_type.startswith("TSubclassOf<"):
        return AttributeType.CLASS
    if cpp_type.endswith("*"):
        if cpp_type == "UTexture2D*":
            return AttributeType.TEXTURE
        if cpp_type == "USkeletalMesh*":
            return AttributeType.SKELETAL_MESH
        return AttributeType.UASSET
    if _ENUM_TYPE.match(cpp_type):
        return AttributeType.ENUM
    if _STRUCT_TYPE.match(cpp_type):
        return AttributeType.STRUCTURE
    return AttributeType.INVALID


def _reference_candidate(name: str) -> str:
    lowered = name.lower()
    for suffix in _REFERENCE_SUFFIXES:
        if lowered.endswith(suffix.lower()):
            return name[:-len(suffix)]
    return name


def _validate_sub_type(
    other_struct_names: Iterable[str],
    found_type: AttributeType,
    cpp_type: str,
    name: str,
    sub_type: str,
    context: ImportContext,
) -> Optional[Tuple[AttributeType, str]]:
    """Check the type against known structs, enums and tables.

    Returns the possibly refined type and sub-type, or ``None`` if the type
    cannot be used.
    """
    if found_type is AttributeType.STRUCTURE:
        if cpp_type not in set(other_struct_names):
            return None
        return found_type, cpp_type
    if found_type is AttributeType.ENUM:
        enum_name = cpp_type[1:]
        if not context.has_enum(enum_name):
            return None
        return found_type, enum_name
    if found_type is AttributeType.SHORT_STRING:
        candidate = _reference_candidate(name)
        if candidate and context.has_structure(candidate):
            return AttributeType.REFERENCE, candidate
    return found_type, sub_type


def resolve_type(
    representation: AttributeRepresentation,
    other_struct_names: Iterable[str],
    context: ImportContext,
) -> AttributeRepresentation:
    """Return ``representation`` with its database type worked out.

    Types that cannot be used become inactive booleans.
    """
    others = tuple(other_struct_names)
    cpp_type = representation.cpp_type
    db_type = type_from_cpp(cpp_type)
    sub_ref = representation.sub_ref
    sub_array_type = representation.sub_array_type
    sub_array_ref = representation.sub_array_ref
    active = representation.active

    if db_type is AttributeType.ARRAY:
        start = cpp_type.find("<")
        end = cpp_type.find(">", start) if start != -1 else -1
        if start != -1 and end != -1 and start < end:
            nested_type = cpp_type[start + 1:end]
            sub_array_type = type_from_cpp(nested_type)
            if sub_array_type in (AttributeType.INVALID, AttributeType.ARRAY):
                db_type = AttributeType.INVALID
            else:
                nested_name = representation.name
                if nested_name.endswith("s"):
                    nested_name = nested_name[:-1]
                nested = _validate_sub_type(
                    others, sub_array_type, nested_type, nested_name, sub_array_ref, context
                )
                if nested is None:
                    db_type = AttributeType.INVALID
                else:
                    sub_array_type, sub_array_ref = nested
        else:
            db_type = AttributeType.INVALID

    outer = _validate_sub_type(others, db_type, cpp_type, representation.name, sub_ref, context)
    if outer is None:
        db_type = AttributeType.INVALID
    else:
        db_type, sub_ref = outer

    if db_type is AttributeType.INVALID:
        db_type = AttributeType.BOOL
        active = False

    return replace(
        representation,
        db_type=db_type,
        sub_ref=sub_ref,
        sub_array_type=sub_array_type,
        sub_array_ref=sub_array_ref,
        active=active,
    )


def _join_uproperty_lines(content: str) -> str:
    start = 0
    while (start := content.find(_UPROPERTY, start)) != -1:
        end = content.find(";", start)
        if end == -1:
            break
        block = content[start:end + 1].replace("\n", " ")
        content = content[:start] + block + content[end + 1:]
        start = end + 1
    return content


def _default_for(representation: AttributeRepresentation, default_text: str) -> str:
    db_type = representation.db_type
    if db_type in (AttributeType.BOOL, AttributeType.INT, AttributeType.SHORT_STRING):
        return default_text
    if db_type is AttributeType.ENUM:
        prefix = representation.cpp_type + "::"
        if default_text.startswith(prefix):
            return default_text[len(prefix):]
        return ""
    if db_type is AttributeType.FLOAT:
        return default_text.replace("f", "")
    return ""


def attribute_representations(
    content: str,
    other_struct_names: Iterable[str],
    context: ImportContext,
) -> list:
    """Read every ``UPROPERTY`` attribute declared in a struct body."""
    others = tuple(other_struct_names)
    prefix = context.attribute_prefix
    suffix = context.attribute_suffix
    representations = []

    for line in _join_uproperty_lines(content).split("\n"):
        if not line or _UPROPERTY not in line or not line.endswith(";"):
            continue

        cleaned = _UPROPERTY_MACRO.sub("", line).replace("\t", "").strip()[:-1]
        parts = [part for part in cleaned.split("=") if part]
        if len(parts) == 1:
            default_text = ""
        elif len(parts) == 2:
            default_text = parts[1].strip()
        else:
            continue

        declaration = [word for word in parts[0].split(" ") if word]
        if len(declaration) != 2:
            continue

        cpp_type, name = declaration
        if name.startswith(prefix):
            name = name[len(prefix):]
        if suffix and name.endswith(suffix):
            name = name[:-len(suffix)]

        representation = resolve_type(AttributeRepresentation(name, cpp_type), others, context)
        if default_text:
            representation = replace(
                representation, default_value=_default_for(representation, default_text)
            )
        representations.append(representation)

    return representations