"""Generic utilities and helpers.

Helpers that are useful across the TreeFrame codebase
but are not bound to the column selection DSL or
to the compute engine.
"""

from . import inspect

__all__ = ("inspect",)
