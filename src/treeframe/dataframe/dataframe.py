"""The Dataframe object itself."""
from typing import Any, Callable, Iterator, Self

import pyarrow as pa

from ..columns import ColumnNode, ColumnsResolver, ResolvedColumn, all_columns, as_resolver, resolve
from ..columns.selectors import CombinedColumns
from ..compute import (
  ConvertNode,
  CSVDataSource,
  DataRow,
  JoinType,
  PredicateJoinNode,
  PyArrowTableDataSource,
  RemoveNode,
  SelectNode,
)
from ..compute.base import QueryPlanNode
from ..compute.join import JoinExpression

Selector = ColumnsResolver | str | tuple[str, ...]


class Dataframe:
  """Data structure that handles data in rows and columns.

  The Dataframe object allows to represent in-memory data
  and perform transformations over it.

  The treeframe dataframe object is lazy, which means that
  any transformation or analysis will be applied only when the
  data is requested (``.collect()``, ``.to_arrow()``, ``.rows()``...)
  and no data is kept in memory until that moment (unless it already was).
  """
  def __init__(self, node_or_table: QueryPlanNode | pa.Table | pa.RecordBatch) -> None:
    """
    :param node_or_table: A compute engine node expected to emit
                          the data for the dataframe or a `pyarrow.Table`.
    """
    if isinstance(node_or_table, (pa.Table, pa.RecordBatch)):
      node_or_table = PyArrowTableDataSource(node_or_table)

    if not isinstance(node_or_table, QueryPlanNode):
      raise ValueError("Invalid input, expected a QueryPlanNode or a PyArrow Table")

    self.node = node_or_table

  @classmethod
  def open_csv(cls, filename: str) -> Self:
    """Open a CSV file and create a Dataframe out of its data.

    :param filename: The path to a local CSV file.
    """
    return cls(CSVDataSource(filename))

  def schema(self) -> ColumnNode:
    """The tree of columns of the dataframe.

    The schema is derived from the schema of the data sources,
    the data is only computed when a conversion
    doesn't declare the type it converts to.
    """
    return ColumnNode.from_schema(self.node.poll_schema())

  def columns(self, selector: Selector | None = None) -> list[ResolvedColumn]:
    """Resolve a selector against the columns of the dataframe.

    :param selector: The columns to resolve, all top level columns by default.
    """
    selector = all_columns() if selector is None else as_resolver(selector)
    return resolve(selector, self.schema())

  def select(self, *selectors: Selector) -> Self:
    """Keep only the selected columns.

    Nested columns are moved to the top level.

    :param selectors: Column names, column paths or selectors.
    """
    return self.__class__(SelectNode(_combine(selectors), self.node))

  def remove(self, *selectors: Selector) -> Self:
    """Remove the selected columns, wherever they are.

    :param selectors: Column names, column paths or selectors.
    """
    return self.__class__(RemoveNode(_combine(selectors), self.node))

  def convert(
    self, selector: Selector, func: Callable[[Any], Any], type: pa.DataType | None = None
  ) -> Self:
    """Replace the values of the selected columns with ``func(value)``.

    :param selector: The columns to convert.
    :param func: Function applied to each value.
    :param type: The type of the converted columns, inferred when not provided.
    """
    return self.__class__(ConvertNode(as_resolver(selector), func, self.node, type=type))

  def predicate_join(
    self,
    other: "Dataframe",
    join_expression: JoinExpression,
    join_type: JoinType = JoinType.INNER,
  ) -> Self:
    """Join with another dataframe matching rows with an expression.

    The expression receives a :class:`treeframe.compute.JoinedRow`,
    where ``row["name"]`` reads this dataframe and ``row.right["name"]``
    reads ``other``::

      campaigns.predicate_join(
        visits, lambda row: row["startDate"] <= row.right["date"] <= row["endDate"]
      )

    :param other: The right side of the join.
    :param join_expression: If two rows match.
    :param join_type: Which rows end up in the result, see :class:`treeframe.compute.JoinType`.
    """
    return self.__class__(PredicateJoinNode(join_expression, self.node, other.node, join_type))

  def inner_predicate_join(self, other: "Dataframe", join_expression: JoinExpression) -> Self:
    """Same as ``predicate_join``, each pair of matching rows."""
    return self.predicate_join(other, join_expression, JoinType.INNER)

  def filter_predicate_join(self, other: "Dataframe", join_expression: JoinExpression) -> Self:
    """Rows of this dataframe that match at least one row of ``other``."""
    return self.predicate_join(other, join_expression, JoinType.FILTER)

  def left_predicate_join(self, other: "Dataframe", join_expression: JoinExpression) -> Self:
    """Matching pairs, plus rows of this dataframe that matched nothing."""
    return self.predicate_join(other, join_expression, JoinType.LEFT)

  def right_predicate_join(self, other: "Dataframe", join_expression: JoinExpression) -> Self:
    """Matching pairs, plus rows of ``other`` that matched nothing."""
    return self.predicate_join(other, join_expression, JoinType.RIGHT)

  def full_predicate_join(self, other: "Dataframe", join_expression: JoinExpression) -> Self:
    """Matching pairs, plus rows of both sides that matched nothing."""
    return self.predicate_join(other, join_expression, JoinType.FULL)

  def exclude_predicate_join(self, other: "Dataframe", join_expression: JoinExpression) -> Self:
    """Rows of this dataframe that match no row of ``other``."""
    return self.predicate_join(other, join_expression, JoinType.EXCLUDE)

  def cross_join(self, other: "Dataframe") -> Self:
    """Each row of this dataframe paired with each row of ``other``."""
    return self.predicate_join(other, lambda row: True, JoinType.INNER)

  def rows(self) -> Iterator[DataRow]:
    """Iterate over the rows of the dataframe.

    For outer joins the cells of the side that had no
    matching row are :data:`treeframe.compute.MISSING`.
    That only holds for the rows of the join itself:
    after further operations (``select``, ``collect``...)
    those cells are ``None``, like any other null value.
    """
    return self.node.rows()

  def collect(self) -> Self:
    """Collect all data of the dataframe in memory.

    Returns a new Dataframe that has all data from the
    previous dataframe eagerly loaded in memory.
    """
    return self.__class__(self.to_arrow())

  def to_arrow(self) -> pa.Table:
    """Collect all the data and return a pyarrow.Table"""
    return pa.Table.from_batches(self.node.batches())

  def __str__(self) -> str:
    return f"Dataframe({self.node})"


def _combine(selectors: tuple[Selector, ...]) -> ColumnsResolver:
  if not selectors:
    raise ValueError("At least one column selector is required")
  if len(selectors) == 1:
    return as_resolver(selectors[0])
  return CombinedColumns(*map(as_resolver, selectors))
