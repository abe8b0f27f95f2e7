"""
Core type definitions for dsdiff.

Canonical node records extracted from a docstore snapshot, change statuses,
and the renderable graph handed to the layout engine.
"""

from enum import StrEnum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class NodeType(StrEnum):
    """Categories of nodes in a docstore graph."""
    DOCUMENT = "document"
    TEXT_NODE = "text-node"


class ChangeStatus(StrEnum):
    """Change classification of a node id across two snapshots."""
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


class Relationship(BaseModel):
    """
    One relation entry of a node.

    `node_id` is a weak reference: it is resolved against the node set when
    links are built and may point nowhere.
    """
    kind: str | None = None
    node_id: str | None = None

    model_config = ConfigDict(frozen=True)


class DocstoreNode(BaseModel):
    """
    Canonical record for one entry of a docstore snapshot.
    """
    id: str
    node_type: NodeType = NodeType.TEXT_NODE
    content_hash: str | None = None
    doc_hash: str | None = None
    ref_doc_id: str | None = None
    relationships: List[Relationship] = Field(default_factory=list)
    class_name: str | None = None
    text: str | None = None

    model_config = ConfigDict(extra="ignore")

    @property
    def target_ids(self) -> List[str]:
        """Relationship targets that carry an id, in order."""
        return [rel.node_id for rel in self.relationships if rel.node_id]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class GraphNode(BaseModel):
    """
    Renderable node with live layout state.

    x/y/vx/vy are mutated by the layout engine that owns the instance;
    fx/fy are set while the node is pinned by a drag.
    """
    id: str
    node_type: NodeType
    status: ChangeStatus = ChangeStatus.UNCHANGED
    x: float | None = None
    y: float | None = None
    vx: float = 0.0
    vy: float = 0.0
    fx: float | None = None
    fy: float | None = None

    @property
    def is_pinned(self) -> bool:
        return self.fx is not None and self.fy is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "nodeType": self.node_type.value,
            "status": self.status.value,
            "x": self.x,
            "y": self.y,
        }


class GraphLink(BaseModel):
    """Directed link between two nodes of the same graph."""
    source: str
    target: str

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.source, "target": self.target}


class Graph(BaseModel):
    """Node/link graph as consumed by the filter and the layout engine."""
    nodes: List[GraphNode] = Field(default_factory=list)
    links: List[GraphLink] = Field(default_factory=list)

    @property
    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "links": [link.to_dict() for link in self.links],
        }
