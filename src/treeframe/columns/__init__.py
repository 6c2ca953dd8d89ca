"""The TreeFrame Column Selection DSL

Most operations on a table need to know which columns
they have to act on: selecting, removing, converting...
Listing the column names works for simple cases, but
tables can be wide and hierarchical, where a column can
be a group of other columns.

The selection DSL allows to describe which columns to
pick with a small set of composable selectors,
that are resolved against a table only when needed:

>>> import pyarrow as pa
>>> from treeframe.columns import col, cols, resolve
>>> table = pa.table({
...     "name": ["Alice", "Bob"],
...     "address": [{"city": "Rome", "zip": "00100"}, {"city": "Milan", "zip": "20100"}],
...     "age": [31, 42],
... })
>>> [c.path for c in resolve(cols("age", "name"), table)]
[('name',), ('age',)]
>>> [c.path for c in resolve(col("address").cols(1), table)]
[('address', 'zip')]
>>> [c.name for c in resolve(cols(lambda c: c.type == pa.string()).recursively(), table)]
['name', 'city', 'zip']

Selectors are plain objects, the same selector can be
resolved against any table that has the columns it needs.

The selection process is made of three parts:

* :mod:`treeframe.columns.base` models the tree of columns
  of a table and the resolved columns.
* :mod:`treeframe.columns.selectors` provides the selectors themselves.
* :mod:`treeframe.columns.resolution` resolves selectors against tables.
"""

from .base import ColumnNode, ColumnsResolver, ResolvedColumn
from .errors import (
    ColumnIndexOutOfBoundsError,
    ColumnNotFoundError,
    ColumnSelectionError,
    InvalidColumnRangeError,
    NotAColumnGroupError,
)
from .resolution import flatten_recursively, resolve
from .schema import Column, DataSchema
from .selectors import (
    ColumnReference,
    all_columns,
    all_dfs,
    as_resolver,
    col,
    cols,
    cols_of,
    dfs,
    dfs_of,
)

__all__ = (
    "ColumnNode",
    "ColumnsResolver",
    "ResolvedColumn",
    "ColumnReference",
    "Column",
    "DataSchema",
    "resolve",
    "flatten_recursively",
    "as_resolver",
    "col",
    "cols",
    "cols_of",
    "all_columns",
    "dfs",
    "all_dfs",
    "dfs_of",
    "ColumnSelectionError",
    "ColumnIndexOutOfBoundsError",
    "InvalidColumnRangeError",
    "NotAColumnGroupError",
    "ColumnNotFoundError",
)
