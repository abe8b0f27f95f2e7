"""
dsdiff - Docstore Snapshot Diff & Graph Layout Engine.

Compares two snapshots of a document store and derives a renderable,
force-laid-out graph of what changed.

Key Components:
- core: Node extraction, data types and the graph model
- analysis: Change classification and comparison orchestration
- layout: Force simulation and viewport (pan/zoom/auto-fit)

Usage:
    from dsdiff.analysis import compare_files
    from dsdiff.layout import LayoutEngine, ViewportController

    comparison = compare_files("before.json", "after.json").unwrap()
    engine = LayoutEngine(comparison.after_graph)
    viewport = ViewportController(engine)
    engine.step()
    viewport.on_frame()
"""

__version__ = "0.1.0"

from .core.types import (
    ChangeStatus, DocstoreNode, Graph, GraphLink, GraphNode,
    NodeType, Relationship,
)

__all__ = [
    "__version__",
    "ChangeStatus",
    "DocstoreNode",
    "Graph",
    "GraphLink",
    "GraphNode",
    "NodeType",
    "Relationship",
]
