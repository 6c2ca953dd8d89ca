"""Provide insights about Python objects."""

import inspect
from typing import Any


def get_qualname(obj: Any) -> str:
    """Get a readable qualified name for the given object.

    Used to describe the predicates and functions that
    selectors and plan nodes were built with.

    For functions or methods, this will return
    something like `module.class.method` or
    `module.function`.

    >>> class Predicates:
    ...   def is_id(self, column):
    ...     return column.name == "id"
    >>> get_qualname(Predicates().is_id)
    'treeframe.utils.inspect.Predicates.is_id'
    >>> get_qualname(len)
    'builtins.len'
    >>> get_qualname(str.title)
    'str.title'
    """
    if inspect.ismodule(obj):
        return obj.__name__

    if inspect.ismethod(obj):
        name = f"{obj.__self__.__class__.__name__}.{obj.__name__}"
    elif hasattr(obj, "__qualname__"):
        name = obj.__qualname__
    else:
        name = obj.__class__.__name__

    module = inspect.getmodule(obj)
    if module is None:
        return name
    return f"{module.__name__}.{name}"
