"""Row level views over the data.

The compute engine works on columns, but some operations,
like evaluating a join predicate, are more naturally
expressed one row at the time.

A :class:`DataRow` gives read-only access to the values
of one row, nested column groups are exposed as dictionaries
and can be navigated by path:

>>> row = DataRow({"name": "Alice", "address": {"city": "Rome"}}, index=0)
>>> row["name"]
'Alice'
>>> row["address", "city"]
'Rome'

A :class:`JoinedRow` combines a row from the left side
of a join with a row from the right side, looking up
the left side by default and the right side through
its ``right`` attribute:

>>> joined = JoinedRow(row, DataRow({"name": "Bob"}, index=3))
>>> joined["name"], joined.right["name"]
('Alice', 'Bob')

When a row is emitted by an outer join and one of the sides
had no matching row, all cells of that side are :data:`MISSING`
instead of ``None``, so that a missing row can be told apart
from a row whose value is null.
"""

from typing import Any, Iterator

from ..columns.errors import ColumnNotFoundError
from ..columns.selectors import ColumnReference


class _MissingType:
    """Type of the :data:`MISSING` marker, there is only one instance."""

    _instance = None

    def __new__(cls) -> "_MissingType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self) -> str:
        return "MISSING"


MISSING = _MissingType()
"""Marks the cells of the side of a join that had no matching row."""

RowKey = str | tuple[str, ...] | ColumnReference


class DataRow:
    """Read-only view over the values of one row."""

    def __init__(self, values: dict[str, Any], index: int) -> None:
        """
        :param values: The values of the row by column name,
                       groups are nested dictionaries.
        :param index: Position of the row in the data it comes from.
        """
        self._values = values
        self.index = index

    def __getitem__(self, key: RowKey) -> Any:
        path = self._key_path(key)
        value = self._values
        for depth, name in enumerate(path):
            if value is MISSING or value is None:
                # A null or missing group has null or missing children.
                return value
            if not isinstance(value, dict) or name not in value:
                raise ColumnNotFoundError(path[: depth + 1])
            value = value[name]
        return value

    def get(self, key: RowKey, default: Any = None) -> Any:
        try:
            return self[key]
        except ColumnNotFoundError:
            return default

    def __contains__(self, key: RowKey) -> bool:
        try:
            self[key]
        except ColumnNotFoundError:
            return False
        return True

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DataRow):
            return NotImplemented
        return self._values == other._values

    def to_dict(self) -> dict[str, Any]:
        """The values of the row as a dictionary."""
        return dict(self._values)

    def is_missing(self) -> bool:
        """If all cells of the row are :data:`MISSING`."""
        return bool(self._values) and all(v is MISSING for v in self._values.values())

    def __repr__(self) -> str:
        return f"DataRow({self.index}, {self._values!r})"

    @staticmethod
    def _key_path(key: RowKey) -> tuple[str, ...]:
        if isinstance(key, ColumnReference):
            return key.path
        if isinstance(key, str):
            return (key,)
        if isinstance(key, tuple):
            return key
        raise TypeError(f"Rows are indexed by column name or path, not {key!r}")


class JoinedRow:
    """A left row and a right row being evaluated by a join.

    Lookups without qualifier go to the left row,
    use :attr:`right` to access the right row.
    """

    def __init__(self, left: DataRow, right: DataRow) -> None:
        self.left = left
        self.right = right

    def __getitem__(self, key: RowKey) -> Any:
        return self.left[key]

    def get(self, key: RowKey, default: Any = None) -> Any:
        return self.left.get(key, default)

    def __repr__(self) -> str:
        return f"JoinedRow(left={self.left!r}, right={self.right!r})"
