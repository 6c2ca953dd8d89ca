import copy
import pickle

import pytest

from treeframe.columns import ColumnNotFoundError, col
from treeframe.compute import MISSING, DataRow, JoinedRow


@pytest.fixture
def row():
    return DataRow(
        {"name": "Alice", "address": {"city": "Rome", "geo": None}, "age": None},
        index=7,
    )


@pytest.mark.parametrize(
    "key,expected",
    [
        ("name", "Alice"),
        (("address", "city"), "Rome"),
        (col("address", "city"), "Rome"),
        ("age", None),
        (("address", "geo", "lat"), None),
    ],
)
def test_getitem(row, key, expected):
    assert row[key] == expected


@pytest.mark.parametrize("key", ["height", ("address", "zip"), ("name", "first")])
def test_missing_column(row, key):
    with pytest.raises(ColumnNotFoundError):
        row[key]
    assert row.get(key) is None
    assert row.get(key, "default") == "default"
    assert key not in row


def test_invalid_key(row):
    with pytest.raises(TypeError):
        row[3]


def test_mapping_protocol(row):
    assert list(row) == ["name", "address", "age"]
    assert len(row) == 3
    assert "name" in row
    assert row.to_dict()["address"] == {"city": "Rome", "geo": None}
    assert row == DataRow(row.to_dict(), index=0)
    assert row.index == 7


def test_missing_group_propagates():
    row = DataRow({"name": MISSING, "address": MISSING}, index=0)
    assert row["address", "city"] is MISSING
    assert row.is_missing()
    assert not DataRow({"name": None}, index=0).is_missing()


def test_missing_is_singleton():
    assert copy.deepcopy(MISSING) is MISSING
    assert pickle.loads(pickle.dumps(MISSING)) is MISSING
    assert type(MISSING)() is MISSING
    assert MISSING != None  # noqa: E711


def test_joined_row(row):
    joined = JoinedRow(row, DataRow({"name": "Bob"}, index=0))
    assert joined["name"] == "Alice"
    assert joined.right["name"] == "Bob"
    assert joined.left is row
    assert joined.get("height", 0) == 0
