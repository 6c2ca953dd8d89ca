"""Errors raised while resolving column selections.

All errors share :class:`ColumnSelectionError` as their base,
but each one also subclasses the builtin exception that
describes it best, so that callers can catch an ``IndexError``
or a ``ValueError`` without knowing about the selection DSL.
"""


class ColumnSelectionError(Exception):
    """Base class for errors raised by column selections."""


class ColumnIndexOutOfBoundsError(ColumnSelectionError, IndexError):
    """A column position or range does not exist in the candidate columns."""

    def __init__(self, index: int | range, size: int) -> None:
        """
        :param index: The offending index or range.
        :param size: How many columns were available.
        """
        self.index = index
        self.size = size
        if isinstance(index, range):
            what = f"Range [{index.start}, {index.stop - 1}]"
        else:
            what = f"Index {index}"
        super().__init__(f"{what} is out of bounds for column set of size {size}")


class InvalidColumnRangeError(ColumnSelectionError, ValueError):
    """A range selection that can't select anything, like an inverted range."""


class NotAColumnGroupError(ColumnSelectionError, TypeError):
    """A column was used as a group of columns, but it's a plain column."""

    def __init__(self, path: tuple[str, ...]) -> None:
        self.path = path
        name = "/".join(path) or "<root>"
        super().__init__(f"Column '{name}' is not a column group")


class ColumnNotFoundError(ColumnSelectionError, LookupError):
    """A single column was required, but no column matched."""

    def __init__(self, path: tuple[str, ...]) -> None:
        self.path = path
        super().__init__(f"Column not found: '{'/'.join(path)}'")
