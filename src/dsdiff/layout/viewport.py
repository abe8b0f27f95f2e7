"""
Viewport Controller - pan/zoom transform and first-frame auto-fit.

The transform maps graph coordinates to screen coordinates:

    screen = graph * scale + translate

Auto-fit runs once per layout (re)initialization, on the first stepped
frame, so it never fights a zoom or pan the user applied afterwards.
"""

import logging
import math
from typing import Dict, Mapping, Optional, Tuple

from pydantic import BaseModel

from ..config import ViewportConfig
from .simulation import LayoutEngine

logger = logging.getLogger(__name__)


class ViewportTransform(BaseModel):
    """Uniform translate + scale applied to the rendered graph."""
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        """Graph -> screen."""
        return x * self.scale + self.translate_x, y * self.scale + self.translate_y

    def invert(self, x: float, y: float) -> Tuple[float, float]:
        """Screen -> graph."""
        return (x - self.translate_x) / self.scale, (y - self.translate_y) / self.scale

    def to_dict(self) -> Dict[str, float]:
        return {
            "translateX": self.translate_x,
            "translateY": self.translate_y,
            "scale": self.scale,
        }


class ViewportController:
    """
    Owns the transform of one rendered graph view.

    Paired with the LayoutEngine of that view; screen-space drag commands
    are converted through the inverse transform before reaching the engine.
    """

    def __init__(self, engine: LayoutEngine, config: Optional[ViewportConfig] = None):
        self.engine = engine
        self.config = config or ViewportConfig()
        self.transform = ViewportTransform()
        self._fitted_generation: Optional[int] = None

    def _clamp_scale(self, scale: float) -> float:
        return min(max(scale, self.config.scale_min), self.config.scale_max)

    # =========================================================================
    # Pan / zoom commands
    # =========================================================================

    def on_zoom(self, transform: ViewportTransform) -> ViewportTransform:
        """Adopt a transform produced by the host's zoom behaviour, clamping its scale."""
        values = (transform.translate_x, transform.translate_y, transform.scale)
        if not all(math.isfinite(v) for v in values) or transform.scale <= 0:
            raise ValueError(f"Invalid transform: {transform}")
        self.transform = transform.model_copy(update={"scale": self._clamp_scale(transform.scale)})
        return self.transform

    def zoom(self, factor: float, anchor_x: float, anchor_y: float) -> ViewportTransform:
        """Scale by `factor` keeping the screen point (anchor_x, anchor_y) fixed."""
        if not math.isfinite(factor) or factor <= 0:
            raise ValueError(f"Zoom factor must be positive, got {factor}")
        gx, gy = self.transform.invert(anchor_x, anchor_y)
        scale = self._clamp_scale(self.transform.scale * factor)
        self.transform = ViewportTransform(
            translate_x=anchor_x - gx * scale,
            translate_y=anchor_y - gy * scale,
            scale=scale,
        )
        return self.transform

    def pan(self, dx: float, dy: float) -> ViewportTransform:
        self.transform = self.transform.model_copy(update={
            "translate_x": self.transform.translate_x + dx,
            "translate_y": self.transform.translate_y + dy,
        })
        return self.transform

    def to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return self.transform.apply(x, y)

    def to_graph(self, x: float, y: float) -> Tuple[float, float]:
        return self.transform.invert(x, y)

    # =========================================================================
    # Auto-fit
    # =========================================================================

    @property
    def needs_fit(self) -> bool:
        return self._fitted_generation != self.engine.generation

    def on_frame(self) -> bool:
        """
        Call after every engine step. Fits the view on the first stepped frame
        of each layout generation; returns True when a fit happened.
        """
        if self.engine.tick_count < 1 or not self.needs_fit:
            return False
        self.fit(self.engine.positions())
        self._fitted_generation = self.engine.generation
        return True

    def fit(self, positions: Mapping[str, Tuple[float, float]]) -> ViewportTransform:
        """
        Fit the padded bounding box of `positions` inside the canvas.

        The scale never exceeds fit_max_scale, so small graphs are not blown
        up, and may go below scale_min so large ones still fit. The box is
        centred on the canvas.
        """
        if not positions:
            return self.transform

        xs = [p[0] for p in positions.values()]
        ys = [p[1] for p in positions.values()]
        min_x, max_x = min(xs), max(xs)
        min_y, max_y = min(ys), max(ys)

        padding = self.config.fit_padding
        box_width = max_x - min_x + padding * 2
        box_height = max_y - min_y + padding * 2

        candidates = [self.config.fit_max_scale]
        if box_width > 0:
            candidates.append(self.config.width / box_width)
        if box_height > 0:
            candidates.append(self.config.height / box_height)
        scale = min(candidates)

        self.transform = ViewportTransform(
            translate_x=self.config.width / 2 - scale * (min_x + max_x) / 2,
            translate_y=self.config.height / 2 - scale * (min_y + max_y) / 2,
            scale=scale,
        )
        logger.debug(f"Auto-fit {len(positions)} nodes: {self.transform.to_dict()}")
        return self.transform

    # =========================================================================
    # Screen-space drag
    # =========================================================================

    def drag_start(self, node_id: str, screen_x: float, screen_y: float) -> None:
        self.engine.on_drag_start(node_id, *self.to_graph(screen_x, screen_y))

    def drag(self, node_id: str, screen_x: float, screen_y: float) -> None:
        self.engine.on_drag(node_id, *self.to_graph(screen_x, screen_y))

    def drag_end(self, node_id: str) -> None:
        self.engine.on_drag_end(node_id)
