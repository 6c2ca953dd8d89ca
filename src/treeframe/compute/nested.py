"""Access and rebuild nested columns of record batches.

Column groups are stored as :class:`pyarrow.StructArray`,
reading a nested column means walking the struct arrays
along its path, while changing a nested column requires
rebuilding all the struct arrays that contain it.

>>> import pyarrow as pa
>>> batch = pa.record_batch({
...     "id": [1, 2],
...     "address": pa.array([{"city": "Rome", "zip": "00100"}, None]),
... })
>>> column_at(batch, ("address", "city")).to_pylist()
['Rome', None]
>>> rebuild_batch(batch, {("address", "zip"): None}).to_pylist()
[{'id': 1, 'address': {'city': 'Rome'}}, {'id': 2, 'address': None}]
"""

from typing import Iterable

import pyarrow as pa

ColumnPath = tuple[str, ...]


def column_at(batch: pa.RecordBatch, path: ColumnPath) -> pa.Array:
    """Get the data of a column, at any depth, of a record batch.

    Null groups make all the columns they contain null.
    """
    array = batch.column(path[0])
    for name in path[1:]:
        index = array.type.get_field_index(name)
        if index < 0:
            raise KeyError(f"Column {'/'.join(path)} does not exist")
        # flatten merges the nulls of the group into its children
        array = array.flatten()[index]
    return array


def rebuild_batch(
    batch: pa.RecordBatch, replacements: dict[ColumnPath, pa.Array | None]
) -> pa.RecordBatch:
    """Build a new record batch with some of its columns replaced.

    Columns can be at any depth and each one is replaced in
    place, so it keeps its position inside its group.
    Replacing a column with ``None`` removes it, groups
    that end up with no columns are removed too.

    :param batch: The original data.
    :param replacements: The new data for each column path.
    """
    fields, arrays = _rebuild_columns(batch.schema, batch.columns, (), replacements)
    return pa.RecordBatch.from_arrays(
        arrays, schema=pa.schema(fields, metadata=batch.schema.metadata)
    )


def _rebuild_columns(
    fields: Iterable[pa.Field],
    arrays: Iterable[pa.Array],
    prefix: ColumnPath,
    replacements: dict[ColumnPath, pa.Array | None],
) -> tuple[list[pa.Field], list[pa.Array]]:
    new_fields, new_arrays = [], []
    for field, array in zip(fields, arrays):
        path = prefix + (field.name,)
        if path in replacements:
            replacement = replacements[path]
            if replacement is not None:
                new_fields.append(pa.field(field.name, replacement.type))
                new_arrays.append(replacement)
            continue

        if pa.types.is_struct(field.type) and _contains_replacements(path, replacements):
            child_fields, child_arrays = _rebuild_columns(
                [field.type.field(i) for i in range(field.type.num_fields)],
                array.flatten(),
                path,
                replacements,
            )
            if not child_fields:
                continue
            array = pa.StructArray.from_arrays(
                child_arrays, fields=child_fields, mask=array.is_null()
            )
            field = pa.field(field.name, array.type, field.nullable, field.metadata)

        new_fields.append(field)
        new_arrays.append(array)
    return new_fields, new_arrays


def _contains_replacements(
    path: ColumnPath, replacements: dict[ColumnPath, pa.Array | None]
) -> bool:
    depth = len(path)
    return any(len(p) > depth and p[:depth] == path for p in replacements)
