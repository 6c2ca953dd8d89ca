"""Selectors to pick columns by predicate, name, position or reference.

Selectors are built by chaining calls, starting from
the module level functions which operate on the top level
columns of a table:

>>> import pyarrow as pa
>>> from treeframe.columns import col, cols, cols_of, resolve
>>> schema = pa.schema([
...     ("id", pa.int64()),
...     ("name", pa.struct([("first", pa.string()), ("last", pa.string())])),
...     ("age", pa.int32()),
... ])
>>> def paths(selector):
...     return ["/".join(c.path) for c in resolve(selector, schema)]

Without arguments, ``cols`` selects all the columns, otherwise
it selects the columns matching the arguments. Names keep
the order of the table, while positions keep the order they
were provided in:

>>> paths(cols())
['id', 'name', 'age']
>>> paths(cols("age", "id"))
['id', 'age']
>>> paths(cols(2, 0))
['age', 'id']
>>> paths(cols(range(0, 2)))
['id', 'name']
>>> paths(cols(lambda c: c.name.endswith("e")))
['name', 'age']

``col`` refers to a single column, when it is a group
``cols`` can select within its columns:

>>> paths(col("name").cols())
['name/first', 'name/last']

Selections by predicate, name, type or reference can be applied
to nested columns too via ``recursively`` (or ``rec`` in short),
selections by position only apply to the columns they pick from:

>>> paths(cols().recursively())
['id', 'name', 'name/first', 'name/last', 'age']
>>> paths(cols(lambda c: not c.is_group).recursively())
['id', 'name/first', 'name/last', 'age']
>>> paths(cols_of(pa.string()).rec())
['name/first', 'name/last']

Positions out of the available columns are reported
when the selection is resolved:

>>> paths(cols(0, 99))
Traceback (most recent call last):
    ...
treeframe.columns.errors.ColumnIndexOutOfBoundsError: Index 99 is out of bounds for column set of size 3
"""

import abc
import warnings
from typing import Any, Callable, Iterable

import pyarrow as pa

from .. import utils
from .base import ColumnNode, ColumnsResolver, ResolvedColumn
from .errors import (
    ColumnIndexOutOfBoundsError,
    InvalidColumnRangeError,
    NotAColumnGroupError,
)
from .resolution import flatten_recursively

ColumnFilter = Callable[[ResolvedColumn], bool]
TypeMatcher = pa.DataType | Callable[[pa.DataType], bool]


class Selectable(ColumnsResolver):
    """A resolver that further selections can be chained to.

    Subclasses must provide the :meth:`candidates`,
    which are the columns ``cols`` and its siblings choose from.
    """

    #: If deprecated ``dfs`` should keep the columns it starts from.
    dfs_includes_top_level = True

    @abc.abstractmethod
    def candidates(self, scope: ColumnNode) -> list[ResolvedColumn]:
        """The columns chained selections choose from."""
        ...

    def cols(self, *args: Any) -> "ColumnSelection":
        """Select among the candidate columns.

        Depending on the arguments this selects:

        * all columns, when no argument is provided.
        * the columns for which a predicate returns ``True``.
        * the columns with the given names, in the table order.
        * the columns at the given positions, in the argument order.
        * a contiguous ``range`` of positions.
        * the columns pointed by the given :class:`ColumnReference`.
        """
        if not args:
            return PredicateSelection(self, accept_all)
        if len(args) == 1 and isinstance(args[0], range):
            return RangeSelection(self, args[0])
        if all(isinstance(arg, ColumnReference) for arg in args):
            return ReferenceSelection(self, args)
        if len(args) == 1 and callable(args[0]):
            return PredicateSelection(self, args[0])
        if all(isinstance(arg, str) for arg in args):
            return NameSelection(self, args)
        if all(isinstance(arg, int) and not isinstance(arg, bool) for arg in args):
            return IndexSelection(self, args)
        raise TypeError(f"Unsupported arguments for cols(): {args!r}")

    def cols_of(
        self, type_: TypeMatcher, predicate: ColumnFilter | None = None
    ) -> "TypedSelection":
        """Select the candidate columns of a given type.

        :param type_: A :class:`pyarrow.DataType` the column type must be equal to
                      or a function like :func:`pyarrow.types.is_integer`
                      that accepts the column type.
        :param predicate: An additional filter for the columns.
        """
        return TypedSelection(self, type_, predicate)

    def dfs(self, predicate: ColumnFilter) -> "RecursiveSelection":
        """Deprecated, use ``cols(predicate).recursively()``."""
        _warn_deprecated("dfs", "cols(predicate).recursively()")
        return self._dfs(predicate)

    def all_dfs(self, include_groups: bool = False) -> "RecursiveSelection":
        """Deprecated, use ``cols().recursively()``."""
        _warn_deprecated("all_dfs", "cols().recursively()")
        return self._all_dfs(include_groups)

    def dfs_of(
        self, type_: TypeMatcher, predicate: ColumnFilter | None = None
    ) -> "RecursiveSelection":
        """Deprecated, use ``cols_of(type_, predicate).recursively()``."""
        _warn_deprecated("dfs_of", "cols_of(type_, predicate).recursively()")
        return self.cols_of(type_, predicate).recursively(
            include_top_level=self.dfs_includes_top_level
        )

    def _dfs(self, predicate: ColumnFilter) -> "RecursiveSelection":
        return self.cols(predicate).recursively(
            include_top_level=self.dfs_includes_top_level
        )

    def _all_dfs(self, include_groups: bool) -> "RecursiveSelection":
        def predicate(column: ResolvedColumn) -> bool:
            return include_groups or not column.is_group

        return self._dfs(predicate)

    def __add__(self, other: "Selectable") -> "CombinedColumns":
        if not isinstance(other, Selectable):
            return NotImplemented
        return CombinedColumns(self, other)


class SingleColumn(Selectable):
    """A resolver that selects exactly one column.

    Chained selections pick among the children
    of the column, which must be a group.
    """

    dfs_includes_top_level = True

    @abc.abstractmethod
    def resolve_single(self, scope: ColumnNode) -> ResolvedColumn:
        """Resolve to the one column."""
        ...

    def resolve(self, scope: ColumnNode) -> list[ResolvedColumn]:
        return [self.resolve_single(scope)]

    def candidates(self, scope: ColumnNode) -> list[ResolvedColumn]:
        column = self.resolve_single(scope)
        if not column.is_group:
            raise NotAColumnGroupError(column.path)
        return column.children()


class ColumnSet(Selectable):
    """A resolver that selects any number of columns.

    Chained selections pick among the columns
    selected by this resolver.
    """

    dfs_includes_top_level = False

    def candidates(self, scope: ColumnNode) -> list[ResolvedColumn]:
        return self.resolve(scope)


class RootColumn(SingleColumn):
    """The group the selection is resolved in, usually the table."""

    def resolve_single(self, scope: ColumnNode) -> ResolvedColumn:
        return ResolvedColumn(scope, scope.path)

    def col(self, name: str, *names: str) -> "ColumnReference":
        return ColumnReference((name,) + names)

    def __str__(self) -> str:
        return "root()"


class ColumnReference(SingleColumn):
    """Reference to one column by its path.

    The path is relative to the group the selection
    is resolved in, resolving the reference fails
    with :class:`ColumnNotFoundError` when there is
    no such column.
    """

    def __init__(self, path: Iterable[str]) -> None:
        """
        :param path: Names of the groups leading to the column,
                     followed by the name of the column itself.
        """
        self.path = tuple(path)
        if not self.path:
            raise ValueError("A column reference requires at least one name")

    @property
    def name(self) -> str:
        return self.path[-1]

    def resolve_single(self, scope: ColumnNode) -> ResolvedColumn:
        node = scope.get(self.path)
        return ResolvedColumn(node, node.path)

    def col(self, name: str, *names: str) -> "ColumnReference":
        """Reference a column nested in this one."""
        return ColumnReference(self.path + (name,) + names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnReference):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def __str__(self) -> str:
        return f"col({', '.join(map(repr, self.path))})"


class ColumnSelection(ColumnSet):
    """A selection among the candidates of another resolver.

    Subclasses implement :meth:`select`, which
    picks columns from the candidates.
    """

    def __init__(self, source: Selectable) -> None:
        """
        :param source: The resolver providing the candidate columns.
        """
        self.source = source

    @abc.abstractmethod
    def select(self, candidates: list[ResolvedColumn]) -> list[ResolvedColumn]:
        """Pick the selected columns among the candidates."""
        ...

    @abc.abstractmethod
    def _call_str(self) -> str:
        """How the selection was invoked, like ``cols('a')``"""
        ...

    def resolve(self, scope: ColumnNode) -> list[ResolvedColumn]:
        return self.select(self.source.candidates(scope))

    def __str__(self) -> str:
        if isinstance(self.source, RootColumn):
            return self._call_str()
        return f"{self.source}.{self._call_str()}"


class TransformableColumnSet(ColumnSelection):
    """A selection whose criterion doesn't depend on the position of the columns.

    As the picking only looks at the columns themselves,
    the same selection can be applied to the nested
    columns of the candidates too using :meth:`recursively`.
    Selections by position can't, a position only
    makes sense among the candidates it was chosen from.
    """

    def recursively(
        self, include_top_level: bool = True, include_groups: bool = True
    ) -> "RecursiveSelection":
        """Apply the selection to all nested columns too.

        :param include_top_level: Consider the candidates themselves,
                                  and not only the columns nested in them.
        :param include_groups: Consider the groups, and not only the plain columns.
        """
        return RecursiveSelection(self, include_top_level, include_groups)

    rec = recursively


class PredicateSelection(TransformableColumnSet):
    """Select the columns accepted by a predicate."""

    def __init__(self, source: Selectable, predicate: ColumnFilter) -> None:
        super().__init__(source)
        self.predicate = predicate

    def select(self, candidates: list[ResolvedColumn]) -> list[ResolvedColumn]:
        return [column for column in candidates if self.predicate(column)]

    def _call_str(self) -> str:
        if self.predicate is accept_all:
            return "cols()"
        return f"cols({utils.inspect.get_qualname(self.predicate)})"


class TypedSelection(PredicateSelection):
    """Select the columns of a given type, optionally filtered by a predicate."""

    def __init__(
        self,
        source: Selectable,
        type_: TypeMatcher,
        predicate: ColumnFilter | None = None,
    ) -> None:
        if not isinstance(type_, pa.DataType) and not callable(type_):
            raise TypeError(f"Expected a pyarrow.DataType or a callable, got {type_!r}")
        super().__init__(source, predicate or accept_all)
        self.type = type_

    def matches_type(self, column: ResolvedColumn) -> bool:
        if isinstance(self.type, pa.DataType):
            return column.type == self.type
        return bool(self.type(column.type))

    def select(self, candidates: list[ResolvedColumn]) -> list[ResolvedColumn]:
        return [
            column
            for column in candidates
            if self.matches_type(column) and self.predicate(column)
        ]

    def _call_str(self) -> str:
        if isinstance(self.type, pa.DataType):
            type_str = str(self.type)
        else:
            type_str = utils.inspect.get_qualname(self.type)
        if self.predicate is accept_all:
            return f"cols_of({type_str})"
        return f"cols_of({type_str}, {utils.inspect.get_qualname(self.predicate)})"


class NameSelection(TransformableColumnSet):
    """Select the columns with the given names.

    The columns are returned in the order they have in the table,
    names that don't exist are ignored.
    """

    def __init__(self, source: Selectable, names: Iterable[str]) -> None:
        super().__init__(source)
        self.names = tuple(names)

    def select(self, candidates: list[ResolvedColumn]) -> list[ResolvedColumn]:
        names = set(self.names)
        return [column for column in candidates if column.name in names]

    def _call_str(self) -> str:
        return f"cols({', '.join(map(repr, self.names))})"


class IndexSelection(ColumnSelection):
    """Select the columns at the given positions, in the given order."""

    def __init__(self, source: Selectable, indices: Iterable[int]) -> None:
        super().__init__(source)
        self.indices = tuple(indices)

    def select(self, candidates: list[ResolvedColumn]) -> list[ResolvedColumn]:
        if not candidates:
            return []
        size = len(candidates)
        selected = []
        for index in self.indices:
            # Negative positions are not supported, they would wrap around.
            if index < 0 or index >= size:
                raise ColumnIndexOutOfBoundsError(index, size)
            selected.append(candidates[index])
        return selected

    def _call_str(self) -> str:
        return f"cols({', '.join(map(str, self.indices))})"


class RangeSelection(ColumnSelection):
    """Select a contiguous range of columns.

    Ranges are python ``range`` objects, so
    ``range(1, 3)`` selects the columns at position 1 and 2.
    """

    def __init__(self, source: Selectable, positions: range) -> None:
        super().__init__(source)
        self.positions = positions

    def select(self, candidates: list[ResolvedColumn]) -> list[ResolvedColumn]:
        if not candidates:
            return []
        if self.positions.step != 1:
            raise InvalidColumnRangeError(
                f"Column ranges must have step 1, got {self.positions.step}"
            )
        first, last = self.positions.start, self.positions.stop - 1
        if last < first:
            raise InvalidColumnRangeError(f"Column range [{first}, {last}] is empty")
        if first < 0 or last >= len(candidates):
            raise ColumnIndexOutOfBoundsError(self.positions, len(candidates))
        return candidates[first : last + 1]

    def _call_str(self) -> str:
        return f"cols({self.positions!r})"


class ReferenceSelection(TransformableColumnSet):
    """Select the columns pointed by the given references.

    References are relative to the candidate columns
    and the columns are returned in the order the references
    were provided. References that point to no column are ignored.
    """

    def __init__(self, source: Selectable, references: Iterable[ColumnReference]) -> None:
        super().__init__(source)
        self.references = tuple(references)

    def select(self, candidates: list[ResolvedColumn]) -> list[ResolvedColumn]:
        by_name = {}
        for column in candidates:
            by_name.setdefault(column.name, column)

        selected = []
        for reference in self.references:
            column = by_name.get(reference.path[0])
            if column is None:
                continue
            node = column.node
            for name in reference.path[1:]:
                node = node.child(name)
                if node is None:
                    break
            else:
                selected.append(ResolvedColumn(node, column.path + reference.path[1:]))
        return selected

    def _call_str(self) -> str:
        return f"cols({', '.join(map(str, self.references))})"


class RecursiveSelection(ColumnSet):
    """Apply a selection to the columns nested in its candidates too.

    The candidates of the wrapped selection are walked depth first
    and the selection is applied to the resulting sequence,
    so that a selection like ``cols(lambda c: c.name == "id")``
    finds the ``id`` columns at any depth.
    """

    def __init__(
        self,
        selection: TransformableColumnSet,
        include_top_level: bool = True,
        include_groups: bool = True,
    ) -> None:
        """
        :param selection: The selection to apply at every depth.
        :param include_top_level: Consider the candidates themselves,
                                  and not only the columns nested in them.
        :param include_groups: Consider the groups, and not only the plain columns.
        """
        self.selection = selection
        self.include_top_level = include_top_level
        self.include_groups = include_groups

    def resolve(self, scope: ColumnNode) -> list[ResolvedColumn]:
        candidates = flatten_recursively(
            self.selection.source.candidates(scope),
            include_top_level=self.include_top_level,
            include_groups=self.include_groups,
        )
        return self.selection.select(candidates)

    def recursively(
        self, include_top_level: bool = True, include_groups: bool = True
    ) -> "RecursiveSelection":
        # Already descending into every group, nothing more to reach.
        return self

    rec = recursively

    def __str__(self) -> str:
        return (
            f"{self.selection}.recursively(include_top_level={self.include_top_level}, "
            f"include_groups={self.include_groups})"
        )


class CombinedColumns(ColumnSet):
    """The columns of multiple resolvers, one after the other."""

    def __init__(self, *resolvers: ColumnsResolver) -> None:
        flattened = []
        for resolver in resolvers:
            if isinstance(resolver, CombinedColumns):
                flattened.extend(resolver.resolvers)
            else:
                flattened.append(resolver)
        self.resolvers = tuple(flattened)

    def resolve(self, scope: ColumnNode) -> list[ResolvedColumn]:
        resolved = []
        for resolver in self.resolvers:
            resolved.extend(resolver.resolve(scope))
        return resolved

    def __str__(self) -> str:
        return " + ".join(map(str, self.resolvers))


def accept_all(column: ResolvedColumn) -> bool:
    """Predicate that selects every column."""
    return True


def _warn_deprecated(name: str, replacement: str) -> None:
    warnings.warn(
        f"{name} is deprecated, use {replacement} instead.",
        DeprecationWarning,
        stacklevel=3,
    )


ROOT = RootColumn()


def cols(*args: Any) -> ColumnSelection:
    """Select among the top level columns, see :meth:`Selectable.cols`."""
    return ROOT.cols(*args)


def cols_of(type_: TypeMatcher, predicate: ColumnFilter | None = None) -> TypedSelection:
    """Select the top level columns of a type, see :meth:`Selectable.cols_of`."""
    return ROOT.cols_of(type_, predicate)


def col(name: str, *names: str) -> ColumnReference:
    """Reference a single column by name or by path.

    ``col("address", "city")`` is the ``city`` column
    inside the ``address`` group.
    """
    return ColumnReference((name,) + names)


def all_columns() -> TransformableColumnSet:
    """Select all the top level columns."""
    return ROOT.cols()


def dfs(predicate: ColumnFilter) -> RecursiveSelection:
    """Deprecated, use ``cols(predicate).recursively()``."""
    _warn_deprecated("dfs", "cols(predicate).recursively()")
    return ROOT._dfs(predicate)


def all_dfs(include_groups: bool = False) -> RecursiveSelection:
    """Deprecated, use ``cols().recursively()``."""
    _warn_deprecated("all_dfs", "cols().recursively()")
    return ROOT._all_dfs(include_groups)


def dfs_of(type_: TypeMatcher, predicate: ColumnFilter | None = None) -> RecursiveSelection:
    """Deprecated, use ``cols_of(type_, predicate).recursively()``."""
    _warn_deprecated("dfs_of", "cols_of(type_, predicate).recursively()")
    return ROOT.cols_of(type_, predicate).recursively(
        include_top_level=ROOT.dfs_includes_top_level
    )


def as_resolver(selector: "ColumnsResolver | str | tuple[str, ...]") -> ColumnsResolver:
    """Accept column names and paths wherever a resolver is expected.

    A string is the name of a top level column, a tuple
    of strings is the path of a nested column.
    """
    if isinstance(selector, ColumnsResolver):
        return selector
    if isinstance(selector, str):
        return ColumnReference((selector,))
    if isinstance(selector, tuple) and all(isinstance(n, str) for n in selector):
        return ColumnReference(selector)
    raise TypeError(f"Not a valid column selector: {selector!r}")
