"""
Force-Directed Layout Engine.

Positions a graph's nodes through an iterative physical simulation that
the host advances one frame at a time with `step()`.

Each frame:
1. alpha moves toward alpha_target by alpha_decay
2. forces add to node velocities: link springs (document links are
   longer), exact pairwise repulsion, then a centering translation
3. velocities are damped and integrated into positions; pinned nodes are
   placed at their pin with zero velocity

Node state lives in numpy arrays indexed like `nodes`; the GraphNode
copies are written back on read (`nodes`, `positions()`, `snapshot()`).
All state lives on the engine instance, so before/after views can each
own one.
"""

import logging
import math
from enum import StrEnum
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..config import LayoutConfig
from ..core.types import Graph, GraphLink, GraphNode, NodeType

logger = logging.getLogger(__name__)

# Golden-angle spiral used for initial placement
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))

# Node pairs processed per repulsion batch
PAIR_CHUNK = 1 << 20


class LayoutState(StrEnum):
    UNINITIALIZED = "uninitialized"
    RUNNING = "running"
    DRAGGING = "dragging"
    SETTLED = "settled"
    DISPOSED = "disposed"


class LayoutDisposedError(RuntimeError):
    """Raised when a disposed engine is used."""


def _finite(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


class LayoutEngine:
    """
    Iterative force simulation over a filtered graph.

    The engine works on copies of the graph's nodes; the graph passed in is
    never mutated. Drag interactions are discrete commands applied between
    frames.
    """

    def __init__(self, graph: Graph, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._rng = np.random.default_rng(self.config.seed)
        self._nodes: List[GraphNode] = []
        self._index: Dict[str, int] = {}
        self._links: List[GraphLink] = []
        self._active_drags: set[str] = set()
        self._disposed = False
        self._reset_arrays(0)

        self.alpha = self.config.alpha
        self.alpha_target = self.config.alpha_target
        self.tick_count = 0
        self.generation = 0

        self._load(graph)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _reset_arrays(self, n: int) -> None:
        self._x = np.zeros(n)
        self._y = np.zeros(n)
        self._vx = np.zeros(n)
        self._vy = np.zeros(n)
        # NaN marks an unpinned node
        self._fx = np.full(n, np.nan)
        self._fy = np.full(n, np.nan)

        pair_i, pair_j = np.triu_indices(n, k=1)
        self._pair_i = pair_i.astype(np.int32)
        self._pair_j = pair_j.astype(np.int32)

        empty = np.zeros(0)
        self._link_source = np.zeros(0, dtype=np.intp)
        self._link_target = np.zeros(0, dtype=np.intp)
        self._link_distance = empty
        self._link_strength = empty
        self._link_bias = empty

    def _load(self, graph: Graph, previous: Optional[Dict[str, GraphNode]] = None) -> None:
        self._nodes = [node.model_copy() for node in graph.nodes]
        self._index = {node.id: i for i, node in enumerate(self._nodes)}
        self._links = [
            link for link in graph.links
            if link.source in self._index and link.target in self._index
        ]

        if previous:
            for node in self._nodes:
                old = previous.get(node.id)
                if old is not None:
                    node.x, node.y = old.x, old.y

        self._init_positions()
        self._reset_arrays(len(self._nodes))
        for i, node in enumerate(self._nodes):
            self._x[i], self._y[i] = node.x, node.y
            self._vx[i], self._vy[i] = node.vx, node.vy
            if node.is_pinned:
                self._fx[i], self._fy[i] = node.fx, node.fy
        self._init_links()

        self.alpha = self.config.alpha
        self.alpha_target = self.config.alpha_target
        self.tick_count = 0
        self.generation += 1
        self._active_drags.clear()

        self._logger.debug(
            f"Layout generation {self.generation}: "
            f"{len(self._nodes)} nodes, {len(self._links)} links"
        )

    def _init_positions(self) -> None:
        """Place nodes without a finite position on a golden-angle spiral around the centre."""
        cx, cy = self.config.center
        for i, node in enumerate(self._nodes):
            if node.is_pinned:
                node.x, node.y = node.fx, node.fy
            if not (_finite(node.x) and _finite(node.y)):
                radius = self.config.initial_radius * math.sqrt(0.5 + i)
                angle = i * INITIAL_ANGLE
                node.x = cx + radius * math.cos(angle)
                node.y = cy + radius * math.sin(angle)
            if not (math.isfinite(node.vx) and math.isfinite(node.vy)):
                node.vx = node.vy = 0.0

    def _init_links(self) -> None:
        if not self._links:
            return

        source = np.array([self._index[link.source] for link in self._links], dtype=np.intp)
        target = np.array([self._index[link.target] for link in self._links], dtype=np.intp)
        count = np.bincount(source, minlength=len(self._nodes)) + np.bincount(target, minlength=len(self._nodes))
        cs, ct = count[source], count[target]

        is_document = np.array([node.node_type == NodeType.DOCUMENT for node in self._nodes])
        self._link_source = source
        self._link_target = target
        self._link_distance = np.where(
            is_document[source] | is_document[target],
            self.config.document_link_distance,
            self.config.text_link_distance,
        )
        self._link_strength = 1 / np.minimum(cs, ct)
        self._link_bias = cs / (cs + ct)

    def reset(self, graph: Graph) -> None:
        """
        Re-initialize for a structurally changed graph (new filter or new data).

        Nodes that survive keep their position; energy returns to full.
        """
        self._check_alive()
        self._sync_nodes()
        self._load(graph, previous={node.id: node for node in self._nodes})

    def reheat(self) -> None:
        """Restore full energy without touching positions."""
        self._check_alive()
        self.alpha = self.config.alpha

    def dispose(self) -> None:
        """End the engine's lifecycle. Further stepping raises."""
        self._disposed = True
        self._nodes = []
        self._index = {}
        self._links = []
        self._reset_arrays(0)
        self._active_drags.clear()

    def _check_alive(self) -> None:
        if self._disposed:
            raise LayoutDisposedError("Layout engine has been disposed")

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> LayoutState:
        if self._disposed:
            return LayoutState.DISPOSED
        if not self._nodes:
            return LayoutState.SETTLED
        if self.tick_count == 0:
            return LayoutState.UNINITIALIZED
        if self._active_drags:
            return LayoutState.DRAGGING
        if self.alpha < self.config.alpha_min:
            return LayoutState.SETTLED
        return LayoutState.RUNNING

    def _sync_nodes(self) -> None:
        """Write array state back onto the GraphNode copies."""
        columns = zip(
            self._x.tolist(), self._y.tolist(), self._vx.tolist(),
            self._vy.tolist(), self._fx.tolist(), self._fy.tolist(),
        )
        for node, (x, y, vx, vy, fx, fy) in zip(self._nodes, columns):
            node.x, node.y, node.vx, node.vy = x, y, vx, vy
            node.fx = None if math.isnan(fx) else fx
            node.fy = None if math.isnan(fy) else fy

    @property
    def nodes(self) -> Tuple[GraphNode, ...]:
        """Current node state. Read only; mutate through the drag commands."""
        self._sync_nodes()
        return tuple(self._nodes)

    @property
    def links(self) -> Tuple[GraphLink, ...]:
        return tuple(self._links)

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {
            node.id: (x, y)
            for node, x, y in zip(self._nodes, self._x.tolist(), self._y.tolist())
        }

    def snapshot(self) -> Graph:
        """Copy of the current graph with positions."""
        self._sync_nodes()
        return Graph(
            nodes=[node.model_copy() for node in self._nodes],
            links=list(self._links),
        )

    # =========================================================================
    # Stepping
    # =========================================================================

    def step(self) -> LayoutState:
        """Advance the simulation by one frame."""
        self._check_alive()
        self.tick_count += 1
        if not self._nodes:
            return self.state

        self.alpha += (self.alpha_target - self.alpha) * self.config.alpha_decay

        self._apply_links(self.alpha)
        self._apply_repulsion(self.alpha)
        self._apply_centering()
        self._integrate()

        return self.state

    def run(self, ticks: int) -> LayoutState:
        """Advance several frames."""
        for _ in range(ticks):
            self.step()
        return self.state

    def _jiggle(self, values: np.ndarray) -> np.ndarray:
        """Replace exact zeros with a tiny seeded offset."""
        zero = values == 0
        if zero.any():
            values[zero] = (self._rng.random(int(zero.sum())) - 0.5) * 1e-6
        return values

    def _apply_links(self, alpha: float) -> None:
        if not self._links:
            return
        n = len(self._nodes)
        s, t = self._link_source, self._link_target

        # Spring lengths use positions advanced by the current velocity
        dx = self._jiggle(self._x[t] + self._vx[t] - self._x[s] - self._vx[s])
        dy = self._jiggle(self._y[t] + self._vy[t] - self._y[s] - self._vy[s])

        length = np.sqrt(dx * dx + dy * dy)
        length = (length - self._link_distance) / length * alpha * self._link_strength
        dx *= length
        dy *= length

        bias = self._link_bias
        self._vx -= np.bincount(t, weights=dx * bias, minlength=n)
        self._vy -= np.bincount(t, weights=dy * bias, minlength=n)
        self._vx += np.bincount(s, weights=dx * (1 - bias), minlength=n)
        self._vy += np.bincount(s, weights=dy * (1 - bias), minlength=n)

    def _apply_repulsion(self, alpha: float) -> None:
        """Exact charge between every pair of nodes, in bounded chunks of pairs."""
        n = len(self._nodes)
        distance_min2 = self.config.distance_min ** 2
        strength = self.config.charge_strength * alpha
        force_x = np.zeros(n)
        force_y = np.zeros(n)

        for start in range(0, len(self._pair_i), PAIR_CHUNK):
            i = self._pair_i[start:start + PAIR_CHUNK]
            j = self._pair_j[start:start + PAIR_CHUNK]

            dx = self._jiggle(self._x[j] - self._x[i])
            dy = self._jiggle(self._y[j] - self._y[i])

            dist2 = dx * dx + dy * dy
            dist2 = np.where(dist2 < distance_min2, np.sqrt(distance_min2 * dist2), dist2)

            w = strength / dist2
            dx *= w
            dy *= w
            force_x += np.bincount(i, weights=dx, minlength=n) - np.bincount(j, weights=dx, minlength=n)
            force_y += np.bincount(i, weights=dy, minlength=n) - np.bincount(j, weights=dy, minlength=n)

        self._vx += force_x
        self._vy += force_y

    def _apply_centering(self) -> None:
        strength = self.config.center_strength
        if strength == 0:
            return
        cx, cy = self.config.center
        self._x -= (self._x.mean() - cx) * strength
        self._y -= (self._y.mean() - cy) * strength

    def _integrate(self) -> None:
        damping = 1 - self.config.velocity_decay
        self._vx *= damping
        self._vy *= damping

        bad = ~(np.isfinite(self._vx) & np.isfinite(self._vy))
        if bad.any():
            self._logger.debug(f"Resetting non-finite velocity on {int(bad.sum())} nodes")
            self._vx[bad] = 0.0
            self._vy[bad] = 0.0

        self._x += self._vx
        self._y += self._vy

        pinned = ~np.isnan(self._fx)
        if pinned.any():
            self._x[pinned] = self._fx[pinned]
            self._y[pinned] = self._fy[pinned]
            self._vx[pinned] = 0.0
            self._vy[pinned] = 0.0

    # =========================================================================
    # Drag commands
    # =========================================================================

    def _node_index(self, node_id: str) -> int:
        self._check_alive()
        index = self._index.get(node_id)
        if index is None:
            raise KeyError(f"Unknown node: {node_id}")
        return index

    @staticmethod
    def _check_point(x: float, y: float) -> None:
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Drag position must be finite, got ({x}, {y})")

    def on_drag_start(self, node_id: str, x: float, y: float) -> None:
        """Grab a node: pin it and wake the simulation up."""
        index = self._node_index(node_id)
        self._check_point(x, y)
        self.alpha_target = self.config.drag_alpha_target
        self._active_drags.add(node_id)
        self._fx[index], self._fy[index] = x, y

    def on_drag(self, node_id: str, x: float, y: float) -> None:
        index = self._node_index(node_id)
        self._check_point(x, y)
        self._fx[index], self._fy[index] = x, y

    def on_drag_end(self, node_id: str) -> None:
        """Release a node back to the forces."""
        index = self._node_index(node_id)
        self._active_drags.discard(node_id)
        self._fx[index] = self._fy[index] = np.nan
        if not self._active_drags:
            self.alpha_target = self.config.alpha_target
