"""Tests for the index loader and seen-set builder"""

import pytest

from itemrec.data import (
    ItemIndexEntry,
    load_index_tables,
    load_items_index,
    load_seen_set,
    load_users_index,
)
from itemrec.errors import DuplicateIndexError, RecordParseError


def test_load_users_index(tmp_path):
    path = tmp_path / "usersIndex.tsv"
    path.write_text("1\tu1\n2\tu2\textra\n", encoding="utf-8")

    users = load_users_index(path)

    assert dict(users) == {1: "u1", 2: "u2"}


def test_users_index_is_read_only(tmp_path):
    path = tmp_path / "usersIndex.tsv"
    path.write_text("1\tu1\n", encoding="utf-8")

    users = load_users_index(path)

    with pytest.raises(TypeError):
        users[2] = "u2"


@pytest.mark.parametrize("line", ["1", "x\tu1", "\tu1"])
def test_malformed_users_line_is_fatal(tmp_path, line):
    path = tmp_path / "usersIndex.tsv"
    path.write_text(f"1\tu1\n{line}\n", encoding="utf-8")

    with pytest.raises(RecordParseError) as excinfo:
        load_users_index(path)

    assert excinfo.value.line_number == 2
    assert excinfo.value.line == line
    assert excinfo.value.kind == "parse"


def test_load_items_index(tmp_path):
    path = tmp_path / "itemsIndex.tsv"
    path.write_text(
        "10\ti10\ttypeA\t0\t100\n"
        "30\ti30\ttypeA,typeC\t5\tPIO_NONE\n"
        "40\ti40\t\t0\t100\n",
        encoding="utf-8",
    )

    items = load_items_index(path)

    assert items[10] == ItemIndexEntry(10, "i10", ("typeA",), 0, 100)
    assert items[30] == ItemIndexEntry(30, "i30", ("typeA", "typeC"), 5, None)
    assert items[40].item_types == ()


@pytest.mark.parametrize("line", [
    "10\ti10\ttypeA\t0",          # missing end time
    "ten\ti10\ttypeA\t0\t100",    # non-integer index
    "10\ti10\ttypeA\tnow\t100",   # non-integer start time
])
def test_malformed_items_line_is_fatal(tmp_path, line):
    path = tmp_path / "itemsIndex.tsv"
    path.write_text(line + "\n", encoding="utf-8")

    with pytest.raises(RecordParseError):
        load_items_index(path)


def test_duplicate_index_last_occurrence_wins(tmp_path, caplog):
    path = tmp_path / "usersIndex.tsv"
    path.write_text("1\tfirst\n1\tsecond\n", encoding="utf-8")

    users = load_users_index(path)

    assert users[1] == "second"
    assert "duplicate" in caplog.text


def test_duplicate_index_rejected_in_strict_mode(tmp_path):
    path = tmp_path / "itemsIndex.tsv"
    path.write_text("10\ta\tt\t0\t1\n10\tb\tt\t0\t1\n", encoding="utf-8")

    with pytest.raises(DuplicateIndexError) as excinfo:
        load_items_index(path, reject_duplicates=True)

    assert excinfo.value.line_number == 2
    assert isinstance(excinfo.value, RecordParseError)


def test_blank_lines_are_skipped(tmp_path):
    path = tmp_path / "usersIndex.tsv"
    path.write_text("1\tu1\n\n2\tu2\r\n", encoding="utf-8")

    assert dict(load_users_index(path)) == {1: "u1", 2: "u2"}


def test_load_seen_set(tmp_path):
    path = tmp_path / "ratings.csv"
    path.write_text("1,10,4.0\n1,20,3\n2,10,1.5\n", encoding="utf-8")

    seen = load_seen_set(path)

    assert seen == frozenset({(1, 10), (1, 20), (2, 10)})


@pytest.mark.parametrize("line", ["1,10", "1,10,good", "a,10,4.0"])
def test_malformed_ratings_line_is_fatal(tmp_path, line):
    path = tmp_path / "ratings.csv"
    path.write_text(line + "\n", encoding="utf-8")

    with pytest.raises(RecordParseError):
        load_seen_set(path)


def test_index_tables_skip_ratings_when_unseen_only_is_off(inputs, make_config):
    # No ratings.csv written: it must not be opened
    inputs("1\t[10:1.0]\n")

    tables = load_index_tables(make_config(unseen_only=False))

    assert tables.seen is None
    assert set(tables.users) == {1, 2}
    assert set(tables.items) == {10, 20, 30}


def test_index_tables_load_ratings_when_unseen_only_is_on(inputs, make_config):
    inputs("1\t[10:1.0]\n", ratings="1,10,4.0\n")

    tables = load_index_tables(make_config(unseen_only=True))

    assert tables.seen == frozenset({(1, 10)})


def test_index_tables_missing_ratings_file(inputs, make_config):
    inputs("1\t[10:1.0]\n")

    with pytest.raises(FileNotFoundError):
        load_index_tables(make_config(unseen_only=True))


def test_index_tables_strict_mode_propagates(inputs, make_config):
    inputs("1\t[10:1.0]\n", users="1\tu1\n1\tu1\n")

    with pytest.raises(DuplicateIndexError):
        load_index_tables(make_config(reject_duplicate_indices=True))


def test_non_utf8_index_line_is_fatal(tmp_path):
    path = tmp_path / "usersIndex.tsv"
    path.write_bytes(b"1\tu1\n2\t\xff\xfe\n")

    with pytest.raises(RecordParseError) as excinfo:
        load_users_index(path)

    assert excinfo.value.line_number == 2
    assert excinfo.value.source == str(path)


@pytest.mark.parametrize("line", ["1,10,nan", "1,10,1_0", "1_0,10,4.0"])
def test_non_numeric_ratings_are_fatal(tmp_path, line):
    path = tmp_path / "ratings.csv"
    path.write_text(line + "\n", encoding="utf-8")

    with pytest.raises(RecordParseError):
        load_seen_set(path)
