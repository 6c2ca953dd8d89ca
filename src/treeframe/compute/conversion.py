"""Query plan nodes that convert the values of columns.

Converting applies a Python function to every
value of the selected columns, replacing the
column with the results. Selected columns keep
their position, even when nested in a group.
"""

from typing import Any, Callable

import pyarrow as pa

from .. import utils
from ..columns import ColumnsResolver, resolve
from .base import QueryPlanNode, empty_batch
from .nested import column_at, rebuild_batch


class ConvertNode(QueryPlanNode):
    """Replace the values of the selected columns with the result of a function.

    >>> import pyarrow as pa
    >>> from treeframe.columns import cols_of
    >>> from treeframe.compute import PyArrowTableDataSource
    >>> data = pa.record_batch({"name": ["alice", "bob"], "age": [31, 42]})
    >>> node = ConvertNode(cols_of(pa.string()), str.title, PyArrowTableDataSource(data))
    >>> next(node.batches()).to_pylist()
    [{'name': 'Alice', 'age': 31}, {'name': 'Bob', 'age': 42}]

    When a group is selected, the function receives
    its values as dictionaries. If both a group and
    some of its columns are selected, the group
    conversion wins.
    """

    def __init__(
        self,
        selector: ColumnsResolver,
        func: Callable[[Any], Any],
        child: QueryPlanNode,
        type: pa.DataType | None = None,
    ) -> None:
        """
        :param selector: The columns to convert.
        :param func: The function applied to every value.
        :param child: The node emitting the data to convert.
        :param type: The type of the converted columns,
                     by default it is inferred from the converted values.
        """
        self.selector = selector
        self.func = func
        self.child = child
        self.type = type

    def __str__(self) -> str:
        return (
            f"ConvertNode(convert={self.selector}, "
            f"with={utils.inspect.get_qualname(self.func)}, child={self.child})"
        )

    def batches(self) -> QueryPlanNode.RecordBatchesGenerator:
        for batch in self.child.batches():
            columns = resolve(self.selector, batch.schema)
            yield rebuild_batch(
                batch,
                {column.path: self.convert(column_at(batch, column.path)) for column in columns},
            )

    def poll_schema(self) -> pa.Schema:
        """The schema of the converted data.

        Without an explicit ``type`` the converted types
        can only be known by converting the data.
        """
        if self.type is None:
            return super().poll_schema()
        batch = empty_batch(self.child.poll_schema())
        columns = resolve(self.selector, batch.schema)
        return rebuild_batch(
            batch, {column.path: pa.array([], type=self.type) for column in columns}
        ).schema

    def convert(self, array: pa.Array) -> pa.Array:
        """Apply the conversion function to all values of a column."""
        if len(array) == 0 and self.type is None:
            # Nothing to infer the new type from.
            return array
        return pa.array([self.func(value) for value in array.to_pylist()], type=self.type)
