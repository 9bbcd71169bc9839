import io

import pytest

from animadb.stringitem import StringItem
from animadb.stringtable import ImportPolicy, StringTable
from animadb.strings_helper import Language


def _identifiers(table):
    return [item.identifier for item in table]


def test_add_item_default_identifier_from_table_name():
    table = StringTable("Table")
    identifier = table.add_item()
    assert identifier == table.name + "_1"
    assert table.index_of(identifier) == 0


def test_add_item_identifiers_are_unique():
    table = StringTable("Table")
    for _ in range(5):
        table.add_item()
    ids = _identifiers(table)
    assert len(set(ids)) == len(ids) == 5


def test_add_item_wanted_identifier_free():
    table = StringTable("Table")
    assert table.add_item(0, "hello") == "hello"
    assert table.get_item("hello").identifier == "hello"


def test_add_item_wanted_identifier_taken():
    table = StringTable("Table")
    table.add_item(0, "hello")
    second = table.add_item(0, "hello")
    assert second != "hello"
    assert second.startswith("hello_")
    assert _identifiers(table) == [second, "hello"]


def test_add_item_out_of_range_appends():
    table = StringTable("T")
    table.add_item(-1, "a")
    table.add_item(99, "b")
    assert _identifiers(table) == ["a", "b"]


def test_index_of_missing_is_none():
    table = StringTable("T")
    assert table.index_of("nothing") is None


def test_get_string_by_index_and_identifier():
    table = StringTable("T")
    table.add_item_with_texts(0, ["bonjour", "hello"], "greet")
    assert table.get_string(0, Language.FRENCH) == "bonjour"
    assert table.get_string("greet", Language.ENGLISH) == "hello"
    assert table.get_string("greet", None) == "greet"
    assert table.get_string(5, Language.FRENCH) is None
    assert table.get_string("missing", Language.FRENCH) is None
    assert table.get_item(-1) is None


def test_resize_grow_and_shrink():
    table = StringTable("T")
    table.resize(4)
    assert len(table) == 4
    assert len(set(_identifiers(table))) == 4
    kept = _identifiers(table)[:2]
    table.resize(2)
    assert _identifiers(table) == kept


def test_resize_negative_raises():
    with pytest.raises(ValueError):
        StringTable("T").resize(-1)


def test_remove_item_by_identifier_and_index():
    table = StringTable("T")
    for name in ("a", "b", "c"):
        table.add_item(-1, name)
    table.remove_item("b")
    assert _identifiers(table) == ["a", "c"]
    table.remove_item(0)
    assert _identifiers(table) == ["c"]
    table.remove_item(10)
    table.remove_item("zzz")
    assert _identifiers(table) == ["c"]


def test_swap_and_move():
    table = StringTable("T")
    for name in ("a", "b", "c"):
        table.add_item(-1, name)
    table.swap_items(0, 2)
    assert _identifiers(table) == ["c", "b", "a"]
    table.move_item(0, 2)
    assert _identifiers(table) == ["b", "a", "c"]
    table.move_item(0, 7)
    table.swap_items(-1, 0)
    assert _identifiers(table) == ["b", "a", "c"]


def test_sort_items():
    table = StringTable("T")
    for name in ("m", "z", "a"):
        table.add_item(-1, name)
    table.sort_items(True)
    assert _identifiers(table) == sorted(_identifiers(table))
    table.sort_items(False)
    assert _identifiers(table) == sorted(_identifiers(table), reverse=True)


def test_set_item_identifier():
    table = StringTable("T")
    table.add_item(-1, "a")
    table.add_item(-1, "b")
    assert table.set_item_identifier(0, "") is False
    assert table.set_item_identifier(5, "x") is False
    assert table.set_item_identifier(0, "b") is False
    assert table.set_item_identifier(0, "a") is True
    assert table.set_item_identifier(0, "x") is True
    assert _identifiers(table) == ["x", "b"]


def test_set_item_string_and_errors():
    table = StringTable("T")
    table.add_item(-1, "a")
    table.set_item_string(0, Language.ENGLISH, "text")
    assert table.get_string("a", Language.ENGLISH) == "text"
    with pytest.raises(IndexError):
        table.set_item_string(3, Language.ENGLISH, "text")
    with pytest.raises(ValueError):
        table.set_item_string(0, 42, "text")


def test_import_string_new_identifier():
    table = StringTable("T")
    table.import_string(Language.FRENCH, "k", "line1\\nline2")
    assert table.get_string("k", Language.FRENCH) == "line1\nline2"


def test_import_string_keep_existing():
    table = StringTable("T")
    table.import_string(Language.FRENCH, "k", "first")
    table.import_string(Language.FRENCH, "k", "second", ImportPolicy.KEEP_EXISTING)
    assert table.get_string("k", Language.FRENCH) == "first"
    assert len(table) == 1


def test_import_string_overwrite():
    table = StringTable("T")
    table.import_string(Language.FRENCH, "k", "first")
    table.import_string(Language.FRENCH, "k", "second", ImportPolicy.OVERWRITE)
    assert table.get_string("k", Language.FRENCH) == "second"
    assert len(table) == 1


def test_import_string_new_row():
    table = StringTable("T")
    table.import_string(Language.FRENCH, "k", "first")
    table.import_string(Language.FRENCH, "k", "second", ImportPolicy.NEW_ROW)
    assert len(table) == 2
    assert table.get_string("k", Language.FRENCH) == "first"
    assert table.get_string(1, Language.FRENCH) == "second"
    assert table.get_item(1).identifier.startswith("k_")


def test_import_string_fills_empty_language_in_place():
    table = StringTable("T")
    table.import_string(Language.FRENCH, "k", "fr")
    table.import_string(Language.ENGLISH, "k", "en", ImportPolicy.NEW_ROW)
    assert len(table) == 1
    assert table.get_string("k", Language.ENGLISH) == "en"


def test_write_csv():
    table = StringTable("T")
    table.add_item_with_texts(0, ["v", "w"], "k")
    stream = io.StringIO()
    table.write_csv(stream, Language.FRENCH)
    assert stream.getvalue() == '\n"k","v"'


def test_write_csv_line_per_item():
    table = StringTable("T")
    table.resize(3)
    stream = io.StringIO()
    table.write_csv(stream, Language.ENGLISH)
    lines = stream.getvalue().split("\n")
    assert lines[0] == ""
    assert lines[1:] == [item.to_csv(Language.ENGLISH) for item in table]


def test_set_name_avoids_dictionary_name_and_cleans():
    table = StringTable("T")
    assert table.set_name("Dict", "Dict") == "Dict_1"
    assert table.set_name("my table", "Dict") == "my_table"
    assert table.name == "my_table"
    assert table.set_name("Dict", None) == "Dict"


def test_add_item_copy_keeps_free_identifier_and_texts():
    table = StringTable("T")
    source = StringItem("copied")
    source.set(Language.ENGLISH, "text")
    assert table.add_item_copy(0, source) == "copied"
    renamed = table.add_item_copy(0, source)
    assert renamed != "copied"
    assert table.get_string(renamed, Language.ENGLISH) == "text"
    assert source.identifier == "copied"


def test_on_change_called():
    calls = []
    table = StringTable("T", on_change=lambda: calls.append(1))
    table.add_item()
    table.remove_item(0)
    assert len(calls) == 2


def test_copy_is_independent():
    table = StringTable("T")
    table.add_item(-1, "a")
    duplicate = table.copy()
    duplicate.set_item_string(0, Language.FRENCH, "changed")
    assert table.get_string("a", Language.FRENCH) == ""
    assert duplicate.name == table.name