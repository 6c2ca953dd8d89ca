"""Declare the columns of a table as properties of a class.

Instead of referring to columns by their names, it is possible
to declare a schema class and use its attributes::

    class Campaigns(DataSchema):
        name = Column(pa.string())
        start_date = Column(pa.date32(), name="startDate")
        end_date = Column(pa.date32(), name="endDate")

    df.select(cols(Campaigns.name, Campaigns.start_date))

Each attribute accessed on the class is a
:class:`treeframe.columns.selectors.ColumnReference`,
so it can be used anywhere a column reference is accepted,
including row lookups like ``row[Campaigns.start_date]``.

>>> import pyarrow as pa
>>> class Visits(DataSchema):
...     date = Column(pa.date32())
...     user_id = Column(pa.int64(), name="userId")
>>> Visits.user_id
col('userId')
>>> Visits.column_names()
['date', 'userId']
>>> Visits.to_arrow_schema()
date: date32[day]
userId: int64
"""

import pyarrow as pa

from .selectors import ColumnReference


class Column:
    """A column declared on a :class:`DataSchema`."""

    def __init__(self, type: pa.DataType | None = None, name: str | None = None) -> None:
        """
        :param type: The expected arrow type of the column, if known.
        :param name: Name of the column in the table,
                     defaults to the name of the attribute.
        """
        self.type = type
        self.name = name

    def __set_name__(self, owner: type, attribute: str) -> None:
        if self.name is None:
            self.name = attribute

    def __get__(self, instance: object, owner: type) -> ColumnReference:
        return ColumnReference((self.name,))


class DataSchema:
    """Base class for classes declaring the columns of a table."""

    @classmethod
    def declared_columns(cls) -> list[Column]:
        """The columns declared on the class and its bases, in declaration order."""
        declared = {}
        for klass in reversed(cls.__mro__):
            for value in vars(klass).values():
                if isinstance(value, Column):
                    declared[value.name] = value
        return list(declared.values())

    @classmethod
    def column_names(cls) -> list[str]:
        return [column.name for column in cls.declared_columns()]

    @classmethod
    def to_arrow_schema(cls) -> pa.Schema:
        """Arrow schema of the declared columns, columns without a type are nulls."""
        return pa.schema(
            [(column.name, column.type or pa.null()) for column in cls.declared_columns()]
        )
