"""Query plan nodes that pick or drop columns.

A common request in queries is to keep only some columns,
or to get rid of some of them.
The columns are chosen with the selectors of
:mod:`treeframe.columns`, so they can be nested at any depth.
"""

import pyarrow as pa

from ..columns import ColumnsResolver, resolve
from .base import QueryPlanNode, empty_batch
from .nested import column_at, rebuild_batch


class SelectNode(QueryPlanNode):
    """Keep only the selected columns.

    Each selected column becomes a top level column
    of the output, named after the column itself,
    even when it was nested in a group.

    >>> import pyarrow as pa
    >>> from treeframe.columns import col, cols
    >>> from treeframe.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({
    ...     "id": [1, 2],
    ...     "address": [{"city": "Rome", "zip": "00100"}, {"city": "Milan", "zip": "20100"}],
    ... })
    >>> node = SelectNode(cols("id") + col("address").cols("city"), PyArrowTableDataSource(data))
    >>> next(node.batches()).to_pylist()
    [{'id': 1, 'city': 'Rome'}, {'id': 2, 'city': 'Milan'}]
    """

    def __init__(self, selector: ColumnsResolver, child: QueryPlanNode) -> None:
        """
        :param selector: The columns to keep.
        :param child: The node emitting the data to select from.
        """
        self.selector = selector
        self.child = child

    def __str__(self) -> str:
        return f"SelectNode(select={self.selector}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        """Extract the selected columns from each batch of the child."""
        for batch in self.child.batches():
            yield self.select(batch)

    def poll_schema(self) -> pa.Schema:
        return self.select(empty_batch(self.child.poll_schema())).schema

    def select(self, batch: pa.RecordBatch) -> pa.RecordBatch:
        columns = resolve(self.selector, batch.schema)

        names = [column.name for column in columns]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise DuplicateColumnNamesError(duplicates)

        arrays = [column_at(batch, column.path) for column in columns]
        return pa.RecordBatch.from_arrays(
            arrays,
            schema=pa.schema(
                [pa.field(name, array.type) for name, array in zip(names, arrays)]
            ),
        )


class RemoveNode(QueryPlanNode):
    """Remove the selected columns, at any depth.

    Groups that are left without columns are removed too.
    """

    def __init__(self, selector: ColumnsResolver, child: QueryPlanNode) -> None:
        """
        :param selector: The columns to remove.
        :param child: The node emitting the data to remove columns from.
        """
        self.selector = selector
        self.child = child

    def __str__(self) -> str:
        return f"RemoveNode(remove={self.selector}, child={self.child})"

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            yield self.remove(batch)

    def poll_schema(self) -> pa.Schema:
        return self.remove(empty_batch(self.child.poll_schema())).schema

    def remove(self, batch: pa.RecordBatch) -> pa.RecordBatch:
        columns = resolve(self.selector, batch.schema)
        return rebuild_batch(batch, {column.path: None for column in columns})


class DuplicateColumnNamesError(ValueError):
    """The selected columns would end up with the same name."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Duplicate column names in selection: {names}")
