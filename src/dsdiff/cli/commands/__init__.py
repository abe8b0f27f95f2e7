"""
CLI Commands Package.

Each command is implemented in its own module for maintainability.
"""

from . import compare
from . import layout
from . import stats

__all__ = [
    "compare",
    "layout",
    "stats",
]
