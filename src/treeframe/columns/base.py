"""Base components of the column selection DSL.

Tables in TreeFrame can be hierarchical: a column whose type
is a :class:`pyarrow.StructType` is a *column group*, and its
fields are columns themselves, that can be groups too.

The schema of a table is thus represented as a tree of
:class:`ColumnNode` objects, where the root node is the
table itself and every other node is a column:

>>> import pyarrow as pa
>>> schema = pa.schema([
...     ("name", pa.string()),
...     ("address", pa.struct([("city", pa.string()), ("zip", pa.int32())])),
... ])
>>> root = ColumnNode.from_schema(schema)
>>> [c.name for c in root.children]
['name', 'address']
>>> root.get(("address", "zip")).path
('address', 'zip')
>>> root.get(("address",)).is_group
True

Selections of columns are described by :class:`ColumnsResolver`
objects, which, given the tree, resolve to the list of
:class:`ResolvedColumn` they select.
"""

import abc
from dataclasses import dataclass

import pyarrow as pa

from .errors import ColumnNotFoundError


@dataclass(frozen=True)
class ColumnNode:
    """A column in the schema of a table.

    Nodes are immutable, any operation that changes the
    structure of a table creates a new table and so
    a new tree of nodes.
    """

    name: str
    path: tuple[str, ...]
    type: pa.DataType
    children: tuple["ColumnNode", ...] = ()

    @classmethod
    def from_schema(cls, schema: pa.Schema) -> "ColumnNode":
        """Build the tree of columns for a table schema.

        The returned node is the root of the tree, it has
        no name and an empty path and its children are the
        top level columns of the table.
        """
        return cls(
            name="",
            path=(),
            type=pa.struct(list(schema)),
            children=tuple(cls.from_field(field, ()) for field in schema),
        )

    @classmethod
    def from_field(cls, field: pa.Field, parent_path: tuple[str, ...]) -> "ColumnNode":
        """Build the node for a field, and for its nested fields if any.

        :param field: The arrow field describing the column.
        :param parent_path: The path of the group containing the column.
        """
        path = parent_path + (field.name,)
        children = ()
        if pa.types.is_struct(field.type):
            children = tuple(
                cls.from_field(field.type.field(i), path)
                for i in range(field.type.num_fields)
            )
        return cls(name=field.name, path=path, type=field.type, children=children)

    @property
    def is_group(self) -> bool:
        """If the column contains other columns."""
        return pa.types.is_struct(self.type)

    def child(self, name: str) -> "ColumnNode | None":
        """Get a direct child by name, ``None`` if it doesn't exist."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def get(self, path: tuple[str, ...]) -> "ColumnNode":
        """Get a descendant column by its path relative to this node.

        :raises ColumnNotFoundError: if any element of the path is missing.
        """
        node = self
        for name in path:
            node = node.child(name)
            if node is None:
                raise ColumnNotFoundError(self.path + tuple(path))
        return node

    def __str__(self) -> str:
        return f"ColumnNode({'/'.join(self.path)}: {self.type})"


@dataclass(frozen=True)
class ResolvedColumn:
    """A column selected by a resolver, together with its path.

    This is what predicates passed to ``cols`` receive
    and what a resolution returns.
    """

    node: ColumnNode
    path: tuple[str, ...]

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def type(self) -> pa.DataType:
        return self.node.type

    @property
    def is_group(self) -> bool:
        return self.node.is_group

    @property
    def depth(self) -> int:
        """Nesting level of the column, 0 for top level columns."""
        return len(self.path) - 1

    def children(self) -> list["ResolvedColumn"]:
        """The columns contained in this column, empty if it's not a group."""
        return [
            ResolvedColumn(child, self.path + (child.name,))
            for child in self.node.children
        ]

    def __str__(self) -> str:
        return f"ResolvedColumn({'/'.join(self.path)}: {self.type})"


class ColumnsResolver(abc.ABC):
    """A lazy description of which columns to select.

    Resolvers don't hold any data and don't look at any
    table until :meth:`resolve` is invoked, thus the same
    resolver can be reused on any table with a compatible
    schema and will always provide the same result for the
    same table.

    Resolvers can be chained, each one consuming the
    columns selected by the previous one.
    A resolver that always selects the ``id`` column
    could be implemented as::

        class IdColumn(ColumnsResolver):
            def resolve(self, scope):
                node = scope.get(("id",))
                return [ResolvedColumn(node, node.path)]

            def __str__(self):
                return "IdColumn()"
    """

    @abc.abstractmethod
    def resolve(self, scope: ColumnNode) -> list[ResolvedColumn]:
        """Resolve the selection against a group of columns.

        :param scope: The group of columns the selection applies to,
                      usually the root node of a table.
        """
        ...

    @abc.abstractmethod
    def __str__(self) -> str:
        """Human readable representation of the selection."""
        ...

    def __repr__(self) -> str:
        return str(self)
