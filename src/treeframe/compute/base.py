"""Base classes and interfaces for the Compute Engine

This module defines the base components that are
necessary to represent a query plan and execute it.
"""

import abc
from typing import Iterable, Iterator

import pyarrow as pa

from .rows import DataRow


class QueryPlanNode(abc.ABC):
    """A node of a query execution plan.

    The Query plan is represented as a tree
    of nodes. Each node is a step in the execution
    and all previous steps are children of the
    last one.

    For example a simple plan might involve
    loading data and keeping only some columns::

        LoadDataNode -> SelectNode(cols("a", "b"))

    That would be a plan where the last step
    is the selection, and the LoadDataNode is a child
    of the select node.

    The number of children can be variable, some
    nodes like for example Joins, will accept two
    child nodes that have to be joined together.

    Each Node accepts :class:`pyarrow.RecordBatch`
    data as its input and emits a new
    :class:`pyarrow.RecordBatch` as its output.

    For example a simple node that takes data
    and just forwards it as is after printing
    its content can be implemented as::

        class DebugDataNode(QueryPlanNode):
            def __init__(self, child):
                self.child = child

            def batches(self):
                for b in self.child.batches():
                    print(b)
                    yield b

            def __str__(self):
                return f"DebugDataNode()"
    """

    RecordBatchesGenerator = Iterator[pa.RecordBatch]

    @abc.abstractmethod
    def batches(self) -> RecordBatchesGenerator:
        """Emits the batches for the next node.

        Each QueryPlan node is expected to be able to
        generate data that has to be provided to the next
        node in the plan.

        Usually this happens by consuming data from its
        child nodes, transforming it somehow, and yielding
        it back to the next consumer.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the node."""
        ...

    def poll_schema(self) -> pa.Schema:
        """The schema of the data emitted by the node.

        By default this has to run the node, nodes that
        can tell their schema from the schema of their
        children override it and avoid processing any data.
        """
        return next(iter(self.batches())).schema

    def rows(self) -> Iterator[DataRow]:
        """Emits the data of the node one row at the time.

        Rows are numbered across all the batches,
        so the first row of the second batch continues
        from where the first batch ended.
        """
        index = 0
        for batch in self.batches():
            for values in batch.to_pylist():
                yield DataRow(values, index)
                index += 1


def combine_batches(batches: Iterable[pa.RecordBatch]) -> pa.RecordBatch:
    """Concatenate multiple record batches into a single one.

    Operations like joins need all the rows of their
    children in memory at the same time, this
    provides them as one single batch.

    At least one batch must be provided, even if empty,
    so that the schema of the data is known.
    """
    batches = list(batches)
    if not batches:
        raise ValueError("At least one batch is required to know the schema")
    table = pa.Table.from_batches(batches)
    return pa.RecordBatch.from_arrays(
        [column.combine_chunks() for column in table.columns], schema=table.schema
    )


def empty_batch(schema: pa.Schema) -> pa.RecordBatch:
    """A record batch with no rows for the given schema."""
    return pa.RecordBatch.from_arrays(
        [pa.array([], type=field.type) for field in schema], schema=schema
    )
