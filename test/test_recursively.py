import warnings

import pyarrow as pa
import pytest

from treeframe.columns import (
    ColumnIndexOutOfBoundsError,
    ColumnNode,
    all_dfs,
    col,
    cols,
    cols_of,
    dfs,
    dfs_of,
    flatten_recursively,
    resolve,
)
from treeframe.columns.selectors import ROOT

SCHEMA = pa.schema(
    [
        ("id", pa.int64()),
        (
            "person",
            pa.struct(
                [
                    ("name", pa.struct([("first", pa.string()), ("last", pa.string())])),
                    ("age", pa.int32()),
                    ("id", pa.int64()),
                ]
            ),
        ),
        ("city", pa.string()),
    ]
)

EVERY_COLUMN = [
    "id",
    "person",
    "person/name",
    "person/name/first",
    "person/name/last",
    "person/age",
    "person/id",
    "city",
]


def paths(selector, root=SCHEMA):
    return ["/".join(c.path) for c in resolve(selector, root)]


def test_every_column_depth_first():
    assert paths(cols().recursively()) == EVERY_COLUMN


def test_only_plain_columns():
    assert paths(cols().recursively(include_groups=False)) == [
        "id",
        "person/name/first",
        "person/name/last",
        "person/age",
        "person/id",
        "city",
    ]


def test_without_top_level():
    assert paths(cols().recursively(include_top_level=False)) == [
        "person/name",
        "person/name/first",
        "person/name/last",
        "person/age",
        "person/id",
    ]


def test_finds_columns_at_any_depth():
    assert paths(cols("id").recursively()) == ["id", "person/id"]
    assert paths(cols(lambda c: c.name == "last").rec()) == ["person/name/last"]
    assert paths(cols_of(pa.string()).rec()) == [
        "person/name/first",
        "person/name/last",
        "city",
    ]


def test_within_group():
    assert paths(col("person").cols().recursively()) == [
        "person/name",
        "person/name/first",
        "person/name/last",
        "person/age",
        "person/id",
    ]


@pytest.mark.parametrize("selector", [cols(0, 2), cols(range(0, 2)), col("person").cols(1)])
def test_positions_are_not_recursive(selector):
    assert not hasattr(selector, "recursively")
    assert not hasattr(selector, "rec")


def test_positions_within_recursive_selection():
    assert paths(cols().recursively().cols(1, 3)) == ["person", "person/name/first"]
    with pytest.raises(ColumnIndexOutOfBoundsError):
        paths(cols(0, 4))


def test_depth():
    depths = {"/".join(c.path): c.depth for c in resolve(cols().rec(), SCHEMA)}
    assert depths["id"] == 0
    assert depths["person/name"] == 1
    assert depths["person/name/last"] == 2


@pytest.mark.parametrize(
    "selector",
    [
        cols(),
        cols("id"),
        cols_of(pa.string()),
        col("person").cols(),
    ],
)
@pytest.mark.parametrize("include_top_level", [True, False])
@pytest.mark.parametrize("include_groups", [True, False])
def test_recursively_is_idempotent(selector, include_top_level, include_groups):
    once = selector.recursively(include_top_level, include_groups)
    twice = once.recursively(include_top_level, include_groups)
    assert resolve(twice, SCHEMA) == resolve(once, SCHEMA)


def test_rec_is_recursively():
    assert resolve(cols().rec(), SCHEMA) == resolve(cols().recursively(), SCHEMA)


def test_deep_nesting():
    field_type = pa.int64()
    for depth in range(100):
        field_type = pa.struct([(f"level{depth}", field_type)])
    schema = pa.schema([("top", field_type)])

    leaves = resolve(cols().recursively(include_groups=False), schema)
    assert len(leaves) == 1
    assert leaves[0].depth == 100


def test_flatten_recursively():
    root = ColumnNode.from_schema(SCHEMA)
    seeds = ROOT.candidates(root)
    flattened = flatten_recursively(seeds)
    assert ["/".join(c.path) for c in flattened] == EVERY_COLUMN
    assert flatten_recursively([]) == []


class TestDeprecatedTraversals:
    def test_dfs(self):
        with pytest.warns(DeprecationWarning, match="dfs is deprecated"):
            selector = dfs(lambda c: c.name == "id")
        assert paths(selector) == ["id", "person/id"]

    def test_dfs_is_cols_recursively(self):
        def predicate(column):
            return column.name.startswith("f") or column.name == "city"

        with pytest.warns(DeprecationWarning):
            deprecated = dfs(predicate)
        assert resolve(deprecated, SCHEMA) == resolve(
            cols(predicate).recursively(), SCHEMA
        )

    def test_all_dfs(self):
        with pytest.warns(DeprecationWarning, match="all_dfs is deprecated"):
            selector = all_dfs()
        assert resolve(selector, SCHEMA) == resolve(
            cols(lambda c: not c.is_group).recursively(), SCHEMA
        )

    def test_all_dfs_with_groups(self):
        with pytest.warns(DeprecationWarning):
            selector = all_dfs(include_groups=True)
        assert paths(selector) == EVERY_COLUMN

    def test_dfs_of(self):
        with pytest.warns(DeprecationWarning, match="dfs_of is deprecated"):
            selector = dfs_of(pa.string())
        assert resolve(selector, SCHEMA) == resolve(
            cols_of(pa.string()).recursively(), SCHEMA
        )

    def test_dfs_of_group(self):
        with pytest.warns(DeprecationWarning):
            selector = col("person").dfs_of(pa.int64())
        assert paths(selector) == ["person/id"]

    def test_dfs_of_group_includes_its_children(self):
        with pytest.warns(DeprecationWarning):
            selector = col("person").dfs(lambda c: True)
        assert resolve(selector, SCHEMA) == resolve(
            col("person").cols().recursively(include_top_level=True), SCHEMA
        )

    def test_dfs_of_column_set_skips_its_columns(self):
        with pytest.warns(DeprecationWarning):
            selector = cols().dfs(lambda c: True)
        assert paths(selector) == [
            "person/name",
            "person/name/first",
            "person/name/last",
            "person/age",
            "person/id",
        ]

    def test_replacement_does_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            paths(cols().recursively())
            paths(cols_of(pa.string()).rec())
