import pytest

from animadb.stringimporter import StringImporter
from animadb.strings_helper import Language
from animadb.stringtable import ImportPolicy, StringTable


def _write(path, lines):
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_imports_lines_after_header(tmp_path):
    fr = _write(tmp_path / "fr.csv", ['"Key","Text"', '"HELLO","Bonjour"', '"BYE","Salut"'])
    importer = StringImporter()
    importer.register_language_file(Language.FRENCH, fr)
    table = StringTable("T")

    count = importer.import_into(table)

    assert count == 2
    assert [item.identifier for item in table] == ["HELLO", "BYE"]
    assert table.get_string("HELLO", Language.FRENCH) == "Bonjour"
    assert table.get_string("BYE", Language.FRENCH) == "Salut"


def test_two_languages_fill_same_items(tmp_path):
    fr = _write(tmp_path / "fr.csv", ["header", '"HELLO","Bonjour"'])
    en = _write(tmp_path / "en.csv", ["header", '"HELLO","Hello"'])
    importer = StringImporter()
    importer.register_language_file(Language.ENGLISH, en)
    importer.register_language_file(Language.FRENCH, fr)
    table = StringTable("T")

    importer.import_into(table)

    assert len(table) == 1
    assert table.get_string("HELLO", Language.FRENCH) == "Bonjour"
    assert table.get_string("HELLO", Language.ENGLISH) == "Hello"


def test_malformed_and_empty_lines_are_skipped(tmp_path):
    fr = _write(
        tmp_path / "fr.csv",
        ["header", "no separator here", '"A","x","y"', '"EMPTY",""', '"OK","fine"'],
    )
    importer = StringImporter()
    importer.register_language_file(Language.FRENCH, fr)
    table = StringTable("T")

    assert importer.import_into(table) == 1
    assert [item.identifier for item in table] == ["OK"]


def test_escaped_newlines_become_real_newlines(tmp_path):
    fr = _write(tmp_path / "fr.csv", ["header", '"MULTI","one\\ntwo"'])
    importer = StringImporter()
    importer.register_language_file(Language.FRENCH, fr)
    table = StringTable("T")

    importer.import_into(table)

    assert table.get_string("MULTI", Language.FRENCH) == "one\ntwo"


def test_keep_existing_policy(tmp_path):
    fr = _write(tmp_path / "fr.csv", ["header", '"HELLO","Nouveau"'])
    importer = StringImporter()
    importer.register_language_file(Language.FRENCH, fr)
    table = StringTable("T")
    table.import_string(Language.FRENCH, "HELLO", "Ancien")

    importer.import_into(table, ImportPolicy.KEEP_EXISTING)

    assert len(table) == 1
    assert table.get_string("HELLO", Language.FRENCH) == "Ancien"


def test_overwrite_policy(tmp_path):
    fr = _write(tmp_path / "fr.csv", ["header", '"HELLO","Nouveau"'])
    importer = StringImporter()
    importer.register_language_file(Language.FRENCH, fr)
    table = StringTable("T")
    table.import_string(Language.FRENCH, "HELLO", "Ancien")

    importer.import_into(table, ImportPolicy.OVERWRITE)

    assert table.get_string("HELLO", Language.FRENCH) == "Nouveau"


def test_registering_again_replaces_file(tmp_path):
    first = _write(tmp_path / "a.csv", ["header", '"A","first"'])
    second = _write(tmp_path / "b.csv", ["header", '"B","second"'])
    importer = StringImporter()
    importer.register_language_file(Language.FRENCH, first)
    importer.register_language_file(Language.FRENCH, second)
    table = StringTable("T")

    importer.import_into(table)

    assert len(importer) == 1
    assert [item.identifier for item in table] == ["B"]


def test_missing_file_raises(tmp_path):
    importer = StringImporter()
    importer.register_language_file(Language.FRENCH, tmp_path / "missing.csv")
    with pytest.raises(OSError):
        importer.import_into(StringTable("T"))


def test_nothing_registered_imports_nothing():
    importer = StringImporter()
    table = StringTable("T")
    assert importer.import_into(table) == 0
    assert len(importer) == 0
    assert len(table) == 0