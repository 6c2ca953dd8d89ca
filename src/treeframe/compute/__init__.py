"""The TreeFrame Compute Engine

The compute engine defines the in-memory
format for query plans and the plan nodes
supported.

The compute engine is tightly bound to Apache Arrow,
thus the engine will expect to always deal with
:class:`pyarrow.RecordBatch` and emit a new RecordBatch
as the result of the node execution.

This allows to easily build compute pipelines like::

    (RecordBatch)-->Node1--(RecordBatch)-->Node2--(RecordBatch)-->...

The query plan nodes themselves are in charge of their execution,
this keeps the behavior near to the node and thus makes easy to
know how a Node is actually executed without having to look around too much.

Nodes that act on columns receive the columns
as selectors from :mod:`treeframe.columns`:

>>> import pyarrow as pa
>>> data = pa.table({
...    "animals": pa.array(["Flamingo", "Horse", "Brittle stars", "Centipede"]),
...    "n_legs": pa.array([2, 4, 5, 100])
... })
>>>
>>> from treeframe.columns import cols_of
>>> from treeframe.compute import PyArrowTableDataSource, SelectNode
>>> query = SelectNode(
...     cols_of(pa.types.is_integer),
...     child=PyArrowTableDataSource(data)
... )
>>> for batch in query.batches():
...     print(batch.to_pydict())
{'n_legs': [2, 4, 5, 100]}

Nodes can also emit their data one row at the time,
which is convenient when the data is consumed by Python code:

>>> [row["n_legs"] for row in query.rows()]
[2, 4, 5, 100]
"""

from .base import QueryPlanNode
from .conversion import ConvertNode
from .datasources import CSVDataSource, PyArrowTableDataSource
from .join import JoinResult, JoinType, PredicateJoinNode
from .rows import MISSING, DataRow, JoinedRow
from .selection import DuplicateColumnNamesError, RemoveNode, SelectNode

__all__ = (
    "QueryPlanNode",
    "CSVDataSource",
    "PyArrowTableDataSource",
    "SelectNode",
    "RemoveNode",
    "ConvertNode",
    "PredicateJoinNode",
    "JoinType",
    "JoinResult",
    "DataRow",
    "JoinedRow",
    "MISSING",
    "DuplicateColumnNamesError",
)
