"""Dataframe library built on top of treeframe.

A dataframe library is a tool designed to handle and manipulate structured data,
typically in the form of tables (i.e., rows and columns).
It allows users to load data from various sources (like CSV files or databases),
explore it, apply transformations, and analyze it.

TreeFrame dataframes can be hierarchical: a column can be a group
of other columns, and the columns an operation acts on are chosen
with the selectors of :mod:`treeframe.columns`:

>>> import pyarrow as pa
>>> from treeframe.dataframe import Dataframe, col, cols
>>> df = Dataframe(pa.table({
...     "id": [1, 2],
...     "contacts": [{"email": "a@x.org", "phone": "123"}, {"email": "b@x.org", "phone": None}],
... }))
>>> df.remove(col("contacts", "phone")).to_arrow().to_pylist()
[{'id': 1, 'contacts': {'email': 'a@x.org'}}, {'id': 2, 'contacts': {'email': 'b@x.org'}}]
>>> [c.path for c in df.columns(cols().rec())]
[('id',), ('contacts',), ('contacts', 'email'), ('contacts', 'phone')]

Rows of two dataframes can be joined with an arbitrary
expression instead of key equality, see :meth:`Dataframe.predicate_join`.
"""

from ..columns import col, cols, cols_of
from ..compute import MISSING, JoinType
from .dataframe import Dataframe

__all__ = ("Dataframe", "JoinType", "MISSING", "col", "cols", "cols_of")
