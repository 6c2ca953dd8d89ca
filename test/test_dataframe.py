import datetime

import pyarrow as pa
import pyarrow.csv as csv
import pytest

from treeframe.columns import col, cols, cols_of
from treeframe.compute import MISSING, PyArrowTableDataSource
from treeframe.dataframe import Dataframe, JoinType

CAMPAIGNS = pa.table(
    {
        "name": ["Winter Sale", "Spring Sale", "Autumn Sale"],
        "period": [
            {"start": datetime.date(2023, 1, 1), "end": datetime.date(2023, 1, 31)},
            {"start": datetime.date(2023, 4, 1), "end": datetime.date(2023, 4, 30)},
            {"start": datetime.date(2023, 10, 1), "end": datetime.date(2023, 10, 31)},
        ],
    }
)

VISITS = pa.table(
    {
        "date": [
            datetime.date(2023, 1, 10),
            datetime.date(2023, 1, 20),
            datetime.date(2023, 4, 15),
            datetime.date(2023, 5, 1),
        ],
        "userId": [1, 2, 1, 3],
    }
)


def during_campaign(row):
    return row["period", "start"] <= row.right["date"] <= row["period", "end"]


@pytest.fixture
def campaigns():
    return Dataframe(CAMPAIGNS)


@pytest.fixture
def visits():
    return Dataframe(VISITS)


def test_init():
    assert isinstance(Dataframe(CAMPAIGNS).node, PyArrowTableDataSource)
    assert isinstance(Dataframe(CAMPAIGNS.to_batches()[0]).node, PyArrowTableDataSource)
    with pytest.raises(ValueError):
        Dataframe({"name": ["Winter Sale"]})


def test_open_csv(tmp_path):
    filename = str(tmp_path / "visits.csv")
    csv.write_csv(VISITS, filename)
    df = Dataframe.open_csv(filename)
    assert df.to_arrow().column("userId").to_pylist() == [1, 2, 1, 3]


def test_columns(campaigns):
    assert [c.name for c in campaigns.columns()] == ["name", "period"]
    assert [c.path for c in campaigns.columns(cols().rec(include_groups=False))] == [
        ("name",),
        ("period", "start"),
        ("period", "end"),
    ]
    assert [c.path for c in campaigns.columns(("period", "end"))] == [("period", "end")]


def test_schema(campaigns):
    schema = campaigns.schema()
    assert schema.get(("period",)).is_group
    assert schema.get(("period", "start")).type == pa.date32()


def test_select(campaigns):
    df = campaigns.select("name", col("period", "end"))
    assert df.to_arrow().to_pylist()[0] == {
        "name": "Winter Sale",
        "end": datetime.date(2023, 1, 31),
    }


def test_select_requires_columns(campaigns):
    with pytest.raises(ValueError):
        campaigns.select()


def test_remove(campaigns):
    df = campaigns.remove(("period", "start"))
    assert df.columns(cols().rec()) == Dataframe(
        pa.table(
            {
                "name": ["x"],
                "period": [{"end": datetime.date(2023, 1, 1)}],
            }
        )
    ).columns(cols().rec())


def test_convert(campaigns):
    df = campaigns.convert(cols_of(pa.date32()).rec(), lambda d: d.month)
    assert df.to_arrow().column("period").to_pylist() == [
        {"start": 1, "end": 1},
        {"start": 4, "end": 4},
        {"start": 10, "end": 10},
    ]


def test_operations_are_lazy(campaigns):
    df = campaigns.convert("name", lambda name: 1 / 0)
    with pytest.raises(ZeroDivisionError):
        df.collect()


@pytest.mark.parametrize(
    "method,join_type,expected",
    [
        (
            "inner_predicate_join",
            JoinType.INNER,
            [("Winter Sale", 1), ("Winter Sale", 2), ("Spring Sale", 1)],
        ),
        (
            "left_predicate_join",
            JoinType.LEFT,
            [("Winter Sale", 1), ("Winter Sale", 2), ("Spring Sale", 1), ("Autumn Sale", MISSING)],
        ),
        (
            "right_predicate_join",
            JoinType.RIGHT,
            [("Winter Sale", 1), ("Winter Sale", 2), ("Spring Sale", 1), (MISSING, 3)],
        ),
        (
            "full_predicate_join",
            JoinType.FULL,
            [
                ("Winter Sale", 1),
                ("Winter Sale", 2),
                ("Spring Sale", 1),
                ("Autumn Sale", MISSING),
                (MISSING, 3),
            ],
        ),
    ],
)
def test_predicate_joins(campaigns, visits, method, join_type, expected):
    df = getattr(campaigns, method)(visits, during_campaign)
    assert [(row["name"], row["userId"]) for row in df.rows()] == expected

    df = campaigns.predicate_join(visits, during_campaign, join_type)
    assert [(row["name"], row["userId"]) for row in df.rows()] == expected


def test_filter_and_exclude_joins(campaigns, visits):
    kept = campaigns.filter_predicate_join(visits, during_campaign)
    excluded = campaigns.exclude_predicate_join(visits, during_campaign)

    assert [row["name"] for row in kept.rows()] == ["Winter Sale", "Spring Sale"]
    assert [row["name"] for row in excluded.rows()] == ["Autumn Sale"]
    assert kept.to_arrow().schema == CAMPAIGNS.schema


def test_cross_join(campaigns, visits):
    assert campaigns.cross_join(visits).to_arrow().num_rows == 12


def test_select_after_join(campaigns, visits):
    df = campaigns.left_predicate_join(visits, during_campaign).select(
        "name", cols_of(pa.int64())
    )
    table = df.to_arrow()
    assert table.column_names == ["name", "userId"]
    assert table.column("userId").to_pylist() == [1, 2, 1, None]


def test_collect(campaigns):
    collected = campaigns.select("name").collect()
    assert isinstance(collected.node, PyArrowTableDataSource)
    assert collected.to_arrow().column("name").to_pylist() == CAMPAIGNS.column("name").to_pylist()


def test_str(campaigns):
    assert (
        str(campaigns.select(cols(0)))
        == "Dataframe(SelectNode(select=cols(0), child=PyArrowTableDataSource(columns=['name', 'period'], rows=3)))"
    )


def test_columns_of_join_without_running_it(campaigns, visits):
    def failing(row):
        raise RuntimeError("the join expression should not be evaluated")

    df = campaigns.left_predicate_join(visits, failing)
    assert [c.name for c in df.columns()] == ["name", "period", "date", "userId"]
    assert df.schema().get(("period", "start")).type == pa.date32()


def test_columns_of_conversion_with_type(campaigns):
    df = campaigns.convert(("period", "start"), lambda d: 1 / 0, type=pa.int8())
    assert df.schema().get(("period", "start")).type == pa.int8()


def test_missing_only_in_join_rows(campaigns, visits):
    df = campaigns.left_predicate_join(visits, during_campaign)
    assert [row["userId"] for row in df.rows()][-1] is MISSING
    assert [row["userId"] for row in df.select("name", "userId").rows()][-1] is None
    assert [row["userId"] for row in df.collect().rows()][-1] is None
