"""
Node presentation data for the external renderer.

Colours, radii and tooltip fields are plain data; the renderer decides how
to draw them.
"""

from typing import Any, Dict

from ..config import NODE_RADII, STATUS_COLORS, TYPE_COLORS
from .graph import GraphIndex
from .types import ChangeStatus, GraphNode, NodeType

STATUS_LABELS: Dict[ChangeStatus, str] = {
    ChangeStatus.ADDED: "New",
    ChangeStatus.DELETED: "Deleted",
    ChangeStatus.MODIFIED: "Modified",
    ChangeStatus.UNCHANGED: "Unchanged",
}

TYPE_LABELS: Dict[NodeType, str] = {
    NodeType.DOCUMENT: "Document",
    NodeType.TEXT_NODE: "Text Node",
}


def node_color(node: GraphNode) -> str:
    """Status colour wins over the type colour; unchanged nodes use their type's colour."""
    if node.status in (ChangeStatus.DELETED, ChangeStatus.ADDED, ChangeStatus.MODIFIED):
        return STATUS_COLORS[node.status.value]
    return TYPE_COLORS[node.node_type.value]


def node_radius(node: GraphNode) -> int:
    return NODE_RADII[node.node_type.value]


def describe_node(node: GraphNode, index: GraphIndex) -> Dict[str, Any]:
    """
    Tooltip fields for a node.

    Documents also report how many nodes they are connected to, counting
    links in both directions (see GraphIndex.connected_count).
    """
    type_label = TYPE_LABELS[node.node_type]
    details: Dict[str, Any] = {
        "id": node.id,
        "type": type_label,
        "status": STATUS_LABELS[node.status],
        "color": node_color(node),
        "radius": node_radius(node),
    }
    if node.node_type == NodeType.DOCUMENT:
        connected = index.connected_count(node.id)
        details["connected_nodes"] = connected
        details["type"] = f"{type_label} (Connected Nodes: {connected})"
    return details


def legend() -> Dict[str, str]:
    """Legend entries shown over the graph."""
    return {
        STATUS_LABELS[ChangeStatus.ADDED]: STATUS_COLORS[ChangeStatus.ADDED.value],
        "Updated": STATUS_COLORS[ChangeStatus.MODIFIED.value],
        STATUS_LABELS[ChangeStatus.DELETED]: STATUS_COLORS[ChangeStatus.DELETED.value],
    }
