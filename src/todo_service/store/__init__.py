"""In-memory record store for task records.

This package provides the :class:`Todo` model and the lock-guarded
:class:`TodoStore` that owns every live record for the process lifetime.
"""

from .memory import TodoStore
from .model import ZERO_TIME, Todo

__all__ = ["Todo", "TodoStore", "ZERO_TIME"]
