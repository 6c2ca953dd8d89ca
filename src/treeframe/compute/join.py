"""Query plan nodes that implement predicate joins.

Most joins match rows of two tables when their keys are equal,
a predicate join instead matches them when an arbitrary
expression evaluated on the two rows is true.
That allows joins on conditions like "the visit happened
while the campaign was running", that no key equality
could express.

The expression receives a :class:`treeframe.compute.rows.JoinedRow`,
looking up a column on it reads the left row, while
``row.right`` reads the right row:

>>> import datetime
>>> import pyarrow as pa
>>> from treeframe.compute import PyArrowTableDataSource
>>> campaigns = PyArrowTableDataSource(pa.table({
...     "name": ["Winter Sale", "Spring Sale"],
...     "startDate": [datetime.date(2023, 1, 1), datetime.date(2023, 4, 1)],
...     "endDate": [datetime.date(2023, 1, 31), datetime.date(2023, 4, 30)],
... }))
>>> visits = PyArrowTableDataSource(pa.table({
...     "date": [datetime.date(2023, 1, 10), datetime.date(2023, 5, 1)],
...     "userId": [1, 3],
... }))
>>> join = PredicateJoinNode(
...     lambda row: row["startDate"] <= row.right["date"] <= row["endDate"],
...     campaigns, visits, JoinType.LEFT
... )
>>> for row in join.rows():
...     print(row["name"], row["userId"])
Winter Sale 1
Spring Sale MISSING

Which rows end up in the result depends on the :class:`JoinType`.
"""

import enum
import logging
from typing import Callable, Iterator

import pyarrow as pa

from .base import QueryPlanNode, combine_batches, empty_batch
from .rows import MISSING, DataRow, JoinedRow

logger = logging.getLogger(__name__)

JoinExpression = Callable[[JoinedRow], bool]


class JoinType(enum.Enum):
    """Which rows a predicate join emits.

    Supposing ``matches(L)`` are the right rows for which
    the expression is true when evaluated with left row ``L``:

    * ``INNER``: a row for each ``L`` and each of its matches.
    * ``FILTER``: each ``L`` that has matches, once, with only the left columns.
    * ``LEFT``: like ``INNER``, plus ``L`` with missing right columns when
      it has no matches.
    * ``RIGHT``: like ``LEFT`` with the two sides swapped, rows follow the
      order of the right table.
    * ``FULL``: like ``LEFT``, plus every right row that matched no left row,
      with missing left columns.
    * ``EXCLUDE``: each ``L`` that has no matches, once, with only the left columns.
    """

    INNER = "inner"
    FILTER = "filter"
    LEFT = "left"
    RIGHT = "right"
    FULL = "full"
    EXCLUDE = "exclude"

    @property
    def keeps_right_columns(self) -> bool:
        """If the result has the columns of the right table too."""
        return self not in (JoinType.FILTER, JoinType.EXCLUDE)


class PredicateJoinNode(QueryPlanNode):
    """Join two data sources matching rows with an expression.

    The join is performed in three steps:

    1. Evaluate the expression for each pair of rows,
       collecting for each left row the right rows it matches,
       in the order of the right table::

        campaigns:                              visits:
        +-------------+------------+------------+  +------------+--------+
        | name        | startDate  | endDate    |  | date       | userId |
        +-------------+------------+------------+  +------------+--------+
        | Winter Sale | 2023-01-01 | 2023-01-31 |  | 2023-01-10 | 1      |
        | Spring Sale | 2023-04-01 | 2023-04-30 |  | 2023-01-20 | 2      |
        +-------------+------------+------------+  | 2023-05-01 | 3      |
                                                   +------------+--------+

        matches:
          Winter Sale -> [0, 1]
          Spring Sale -> []

    2. Align the matches into pairs of row indices, according to the
       join type. Sides without a matching row get a null index::

        LEFT join:
          left:  [0, 0, 1]
          right: [0, 1, null]

    3. Take the rows at those indices from the two tables
       and combine their columns in a single record batch.
       Right columns that have the same name as a left column
       get the ``_right`` suffix::

        +-------------+------------+------------+------------+--------+
        | name        | startDate  | endDate    | date       | userId |
        +-------------+------------+------------+------------+--------+
        | Winter Sale | 2023-01-01 | 2023-01-31 | 2023-01-10 | 1      |
        | Winter Sale | 2023-01-01 | 2023-01-31 | 2023-01-20 | 2      |
        | Spring Sale | 2023-04-01 | 2023-04-30 | null       | null   |
        +-------------+------------+------------+------------+--------+

    The record batches emitted by the node can only represent the
    missing side as nulls, :meth:`rows` instead marks its cells
    as :data:`treeframe.compute.rows.MISSING`.

    The expression is evaluated for every pair of rows,
    so the cost is proportional to the product of the sizes
    of the two tables and all the rows of both tables are kept
    in memory.
    """

    def __init__(
        self,
        join_expression: JoinExpression,
        left_child: QueryPlanNode,
        right_child: QueryPlanNode,
        join_type: JoinType = JoinType.INNER,
    ) -> None:
        """
        :param join_expression: Function receiving a :class:`JoinedRow`,
                                returning if the two rows match.
                                It must only depend on the two rows.
        :param left_child: The left source of data to join.
        :param right_child: The right source of data to join.
        :param join_type: Which rows to emit.
        """
        self.join_expression = join_expression
        self.left_child = left_child
        self.right_child = right_child
        self.join_type = JoinType(join_type)

    def __str__(self) -> str:
        return (
            f"PredicateJoinNode(type={self.join_type.value}, "
            f"left={self.left_child}, right={self.right_child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Perform the join and emit its result as a single batch."""
        yield self.join().batch

    def poll_schema(self) -> pa.Schema:
        """The schema of the joined data, without evaluating the expression."""
        return JoinResult.assemble(
            empty_batch(self.left_child.poll_schema()),
            empty_batch(self.right_child.poll_schema()),
            [],
            [],
            self.join_type.keeps_right_columns,
        ).batch.schema

    def rows(self) -> Iterator[DataRow]:
        """Perform the join and emit its rows, with missing sides marked.

        Only the rows of the join itself mark the missing sides,
        nodes consuming the join receive record batches
        where those cells are null.
        """
        yield from self.join().rows()

    def join(self) -> "JoinResult":
        """Perform the join.

        Accumulates all rows of both children to
        perform the join operation, so it is not suitable
        for large datasets.
        """
        left = combine_batches(self.left_child.batches())
        right = combine_batches(self.right_child.batches())
        left_rows = [DataRow(values, index) for index, values in enumerate(left.to_pylist())]
        right_rows = [DataRow(values, index) for index, values in enumerate(right.to_pylist())]

        matches = self.match(left_rows, right_rows)
        left_indices, right_indices = self.align(matches, len(right_rows))
        result = JoinResult.assemble(
            left, right, left_indices, right_indices, self.join_type.keeps_right_columns
        )
        logger.debug(
            "%s predicate join of %d rows with %d rows emitted %d rows",
            self.join_type.value,
            len(left_rows),
            len(right_rows),
            result.batch.num_rows,
        )
        return result

    def match(self, left_rows: list[DataRow], right_rows: list[DataRow]) -> list[list[int]]:
        """For each left row, the indices of the right rows it matches."""
        return [
            [
                right_row.index
                for right_row in right_rows
                if self.join_expression(JoinedRow(left_row, right_row))
            ]
            for left_row in left_rows
        ]

    def align(
        self, matches: list[list[int]], right_size: int
    ) -> tuple[list[int | None], list[int | None]]:
        """Pair the left and right row indices the result is made of.

        ``None`` means that there is no row for that side.
        """
        left_indices: list[int | None] = []
        right_indices: list[int | None] = []

        def emit(left_index: int | None, right_index: int | None) -> None:
            left_indices.append(left_index)
            right_indices.append(right_index)

        join_type = self.join_type
        if join_type is JoinType.RIGHT:
            matched_by = [[] for _ in range(right_size)]
            for left_index, right_matches in enumerate(matches):
                for right_index in right_matches:
                    matched_by[right_index].append(left_index)
            for right_index, left_matches in enumerate(matched_by):
                for left_index in left_matches or [None]:
                    emit(left_index, right_index)
            return left_indices, right_indices

        for left_index, right_matches in enumerate(matches):
            if join_type is JoinType.FILTER:
                if right_matches:
                    emit(left_index, None)
            elif join_type is JoinType.EXCLUDE:
                if not right_matches:
                    emit(left_index, None)
            else:
                for right_index in right_matches:
                    emit(left_index, right_index)
                if not right_matches and join_type in (JoinType.LEFT, JoinType.FULL):
                    emit(left_index, None)

        if join_type is JoinType.FULL:
            matched = {right_index for right_matches in matches for right_index in right_matches}
            for right_index in range(right_size):
                if right_index not in matched:
                    emit(None, right_index)

        return left_indices, right_indices


class JoinResult:
    """The output of a predicate join.

    Provides the joined data and, for each row,
    the index of the left and right rows it was built from.
    """

    def __init__(
        self,
        batch: pa.RecordBatch,
        left_indices: list[int | None],
        right_indices: list[int | None],
        left_names: list[str],
        right_names: list[str],
    ) -> None:
        """
        :param batch: The joined data, missing sides are null.
        :param left_indices: Index in the left table of each row, ``None`` if missing.
        :param right_indices: Index in the right table of each row, ``None`` if missing.
        :param left_names: Names of the columns coming from the left table.
        :param right_names: Names of the columns coming from the right table.
        """
        self.batch = batch
        self.left_indices = left_indices
        self.right_indices = right_indices
        self.left_names = left_names
        self.right_names = right_names

    @classmethod
    def assemble(
        cls,
        left: pa.RecordBatch,
        right: pa.RecordBatch,
        left_indices: list[int | None],
        right_indices: list[int | None],
        keep_right: bool = True,
    ) -> "JoinResult":
        """Build the joined data by taking the rows at the given indices."""
        # Taking a null index emits a null row
        taken_left = left.take(pa.array(left_indices, type=pa.int64()))
        names = list(left.schema.names)
        arrays = list(taken_left.columns)
        left_names = list(names)

        right_names = []
        if keep_right:
            taken_right = right.take(pa.array(right_indices, type=pa.int64()))
            for name, array in zip(right.schema.names, taken_right.columns):
                while name in names:
                    # Column already exists in the left table, we need to rename it
                    name = name + "_right"
                names.append(name)
                right_names.append(name)
                arrays.append(array)

        batch = pa.RecordBatch.from_arrays(
            arrays,
            schema=pa.schema([pa.field(n, a.type) for n, a in zip(names, arrays)]),
        )
        return cls(batch, left_indices, right_indices, left_names, right_names)

    def rows(self) -> Iterator[DataRow]:
        """The joined rows, cells of a missing side are :data:`MISSING`."""
        for index, values in enumerate(self.batch.to_pylist()):
            if self.left_indices[index] is None:
                values.update(dict.fromkeys(self.left_names, MISSING))
            if self.right_names and self.right_indices[index] is None:
                values.update(dict.fromkeys(self.right_names, MISSING))
            yield DataRow(values, index)
