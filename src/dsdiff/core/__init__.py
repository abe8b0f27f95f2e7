"""
dsdiff Core Module.

Core Types & Graph:
    - DocstoreNode, GraphNode, GraphLink, Graph: data structures
    - NodeExtractor: raw snapshot -> canonical node records
    - GraphModelBuilder, filter_graph: node records -> renderable graph
    - GraphIndex: connectivity queries over a built graph
"""

from .extractor import NodeExtractor
from .graph import GraphIndex, GraphModelBuilder, filter_graph
from .result import Err, Ok, Result
from .types import (
    ChangeStatus,
    DocstoreNode,
    Graph,
    GraphLink,
    GraphNode,
    NodeType,
    Relationship,
)

__all__ = [
    "ChangeStatus",
    "DocstoreNode",
    "Err",
    "Graph",
    "GraphIndex",
    "GraphLink",
    "GraphModelBuilder",
    "GraphNode",
    "NodeExtractor",
    "NodeType",
    "Ok",
    "Relationship",
    "Result",
    "filter_graph",
]
