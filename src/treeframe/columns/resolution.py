"""Resolution of column selections against concrete tables.

Selections are declarative, :func:`resolve` is the point where
they meet a table (or a schema, or a group of columns) and
get turned into the list of columns they select.
"""

import logging
from typing import Iterable

import pyarrow as pa

from .base import ColumnNode, ColumnsResolver, ResolvedColumn
from .errors import NotAColumnGroupError

logger = logging.getLogger(__name__)


def resolve(
    resolver: ColumnsResolver,
    root: ColumnNode | pa.Schema | pa.Table | pa.RecordBatch,
) -> list[ResolvedColumn]:
    """Resolve a selection to the ordered list of columns it selects.

    Columns are not deduplicated, if the selection picks
    the same column more than once, it will be returned more than once.

    :param resolver: The selection to resolve.
    :param root: Where to look for columns, for tables and schemas
                 the top level columns are the candidates,
                 for a :class:`ColumnNode` its children are.
    """
    scope = as_scope(root)
    resolved = resolver.resolve(scope)
    logger.debug("Resolved %s to %d columns", resolver, len(resolved))
    return resolved


def as_scope(root: ColumnNode | pa.Schema | pa.Table | pa.RecordBatch) -> ColumnNode:
    """Get the group of columns a selection should be resolved in."""
    if isinstance(root, ColumnNode):
        if not root.is_group:
            raise NotAColumnGroupError(root.path)
        return root
    if isinstance(root, pa.Schema):
        return ColumnNode.from_schema(root)
    if isinstance(root, (pa.Table, pa.RecordBatch)):
        return ColumnNode.from_schema(root.schema)
    raise TypeError(f"Can't resolve columns in object of type {type(root)}")


def flatten_recursively(
    seeds: Iterable[ResolvedColumn],
    include_top_level: bool = True,
    include_groups: bool = True,
) -> list[ResolvedColumn]:
    """Walk the seeds and all the columns nested in them, depth first.

    Columns are emitted in pre-order: each group comes
    before its children and siblings keep the order
    they have in the table.
    Given ``a``, ``b(c, d(e))``, ``f`` the result would be::

        a, b, c, d, e, f

    The traversal uses an explicit stack, so deeply
    nested schemas don't hit the recursion limit.

    :param seeds: The columns to start from.
    :param include_top_level: Emit the seeds themselves too,
                              not only what they contain.
    :param include_groups: Emit the groups, not only the plain columns.
    """
    flattened = []
    stack = [(column, True) for column in reversed(list(seeds))]
    while stack:
        column, is_seed = stack.pop()
        if (include_top_level or not is_seed) and (include_groups or not column.is_group):
            flattened.append(column)
        stack.extend((child, False) for child in reversed(column.children()))
    return flattened
