import pyarrow as pa
import pytest

from treeframe.compute.nested import column_at, rebuild_batch

MOCK_DATA = pa.record_batch(
    {
        "id": [1, 2, 3],
        "a": pa.array(
            [
                {"b": {"c": 1, "d": "x"}, "e": True},
                {"b": None, "e": False},
                None,
            ],
            type=pa.struct(
                [
                    ("b", pa.struct([("c", pa.int64()), ("d", pa.string())])),
                    ("e", pa.bool_()),
                ]
            ),
        ),
    }
)


@pytest.mark.parametrize(
    "path,expected",
    [
        (("id",), [1, 2, 3]),
        (("a", "e"), [True, False, None]),
        (("a", "b", "c"), [1, None, None]),
        (("a", "b", "d"), ["x", None, None]),
    ],
)
def test_column_at(path, expected):
    assert column_at(MOCK_DATA, path).to_pylist() == expected


def test_column_at_missing():
    with pytest.raises(KeyError):
        column_at(MOCK_DATA, ("a", "missing"))


def test_rebuild_replaces_in_place():
    batch = rebuild_batch(MOCK_DATA, {("a", "b", "c"): pa.array([10, 20, 30])})
    assert batch.schema == MOCK_DATA.schema
    assert batch.column("a").to_pylist() == [
        {"b": {"c": 10, "d": "x"}, "e": True},
        {"b": None, "e": False},
        None,
    ]


def test_rebuild_removes_columns():
    batch = rebuild_batch(MOCK_DATA, {("a", "e"): None, ("id",): None})
    assert batch.schema.names == ["a"]
    assert batch.schema.field("a").type == pa.struct(
        [("b", pa.struct([("c", pa.int64()), ("d", pa.string())]))]
    )


def test_rebuild_without_replacements():
    assert rebuild_batch(MOCK_DATA, {}).equals(MOCK_DATA)
