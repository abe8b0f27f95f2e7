"""Force-directed layout and viewport control."""

from .simulation import LayoutDisposedError, LayoutEngine, LayoutState
from .viewport import ViewportController, ViewportTransform

__all__ = [
    "LayoutDisposedError",
    "LayoutEngine",
    "LayoutState",
    "ViewportController",
    "ViewportTransform",
]
