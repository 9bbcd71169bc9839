# animadb

Building blocks for editing game data tables. The package provides
localised string tables, search across strings and enumerators, reading of
structure and attribute declarations from C++ headers, and the reading and
writing of the sections of the project's save-file format.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `animadb.strings_helper` holds the `Language` enumeration (`FRENCH`,
  `ENGLISH`) and the functions `language_from_code`, `language_code` and
  `language_name`. It also has `clean_identifier`, which turns spaces into
  underscores and drops punctuation, and `unique_identifier`, which adds or
  continues a numeric `_N` suffix until the identifier is free. Its
  `replace_dictionary_references` fills in `$id$` references from a
  dictionary table.
- `animadb.stringitem` defines `StringItem`: one identifier with one text for
  each language. Items compare and sort by identifier. `to_csv` returns a
  `"id","text"` pair in which newlines are escaped.
- `animadb.stringtable` defines `StringTable`, an ordered list of items with
  unique identifiers. It can add, copy, remove, swap, move, sort, resize and
  rename items. `import_string` imports a text and follows an
  `ImportPolicy` (`OVERWRITE`, `KEEP_EXISTING` or `NEW_ROW`). `write_csv`
  writes the table for one language. An optional `on_change` callback runs
  after every change.
- `animadb.stringimporter` defines `StringImporter`. It takes one CSV file
  for each language through `register_language_file`, and `import_into`
  loads those files into a `StringTable`.
- `animadb.search` provides `SearchParameter`, `SearchResult`, `Category`,
  `matches`, `search_strings`, `search_enums` and `search`. They search
  string tables and enumerators, by substring or by whole word, with or
  without case sensitivity. Any object with `name` and `values` counts as
  an enumerator.
- `animadb.cppimport` reads C++ source. `split_structs` finds the
  `USTRUCT` bodies and separates data-table row structs from the other
  structs. `attribute_representations` turns the `UPROPERTY` fields into
  `AttributeRepresentation` records, and `resolve_type` maps their types to
  `AttributeType` by way of an `ImportContext` of known enumerators and
  tables. Types it cannot use become inactive booleans. The helpers are
  `type_from_cpp`, `struct_name`, `bracket_content`,
  `remove_comment_blocks`, `remove_comment_lines` and `decompose_csv_line`.
  The module also defines `OverwritePolicy`.
- `animadb.savefile` handles save files whose sections are joined by a
  separator line. `split_sections` also accepts compressed data, and
  `join_sections` writes uncompressed data. It also provides
  `find_separator`, `temp_folder_for` and `autosave_path`. For the section
  contents there are `ProjectInfo` with `to_text` and
  `parse_project_info`, `parse_string_section`, which returns
  `StringTable`s, and `parse_enum_section`, which returns
  `EnumDefinition`s.

## Example

```python
from animadb.strings_helper import Language
from animadb.stringtable import StringTable

table = StringTable("Dialogs")
identifier = table.add_item(-1, "GREETING")
table.set_item_string(0, Language.ENGLISH, "Hello")
print(table.get_string(identifier, Language.ENGLISH))
```

## What it does not do

- It has no structure tables or structure rows. Attribute representations
  read from C++ are plain records; nothing builds templates or stores data
  rows from them.
- `search` does not look through structure data, only string tables and
  enumerators.
- The structure-template and data sections of a save file come back from
  `split_sections` as raw bytes, and the package does not interpret them.
  No function saves or opens a whole database in one step.
- There is no command-line program and no graphical editor.