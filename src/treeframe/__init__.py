"""TreeFrame

Column selection and predicate joins for hierarchical tables.

TreeFrame works on Apache Arrow tables whose columns can be
groups of other columns, and provides:

* The Column Selection DSL, to describe which columns an operation
  should act on, at any depth of the table.
* The Compute Engine, in charge of executing operations on the data,
  including joins where rows are matched by an arbitrary expression.
* The Dataframe API, which provides an high level API for the compute engine.

For the user guide and code documentation of each component, refer to the
component itself.
"""

from . import columns, compute, dataframe

__all__ = ("columns", "compute", "dataframe")
