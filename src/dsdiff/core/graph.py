"""
Graph model for docstore snapshots.

- GraphModelBuilder turns extracted node records (plus an optional status
  lookup) into a renderable node/link graph.
- filter_graph derives the visible subgraph for a set of node types.
- GraphIndex is a rustworkx-backed index over a built graph for degree and
  connectivity queries (node inspection, snapshot statistics).
"""

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

import rustworkx as rx

from .types import ChangeStatus, DocstoreNode, Graph, GraphLink, GraphNode, NodeType

logger = logging.getLogger(__name__)


class GraphModelBuilder:
    """
    Converts a node-record mapping into a node/link graph.

    Node order follows the mapping; link order follows node order combined
    with each node's relationship order.
    """

    def build(
        self,
        node_map: Mapping[str, DocstoreNode],
        status_lookup: Optional[Mapping[str, ChangeStatus]] = None,
    ) -> Graph:
        nodes: List[GraphNode] = []
        for node_id, record in node_map.items():
            status = ChangeStatus.UNCHANGED
            if status_lookup is not None:
                status = status_lookup.get(node_id, ChangeStatus.UNCHANGED)
            nodes.append(GraphNode(id=node_id, node_type=record.node_type, status=status))

        links: List[GraphLink] = []
        dangling = 0
        for node_id, record in node_map.items():
            for rel in record.relationships:
                if not rel.node_id:
                    continue
                if rel.node_id not in node_map:
                    dangling += 1
                    continue
                links.append(GraphLink(source=node_id, target=rel.node_id))

        if dangling:
            logger.debug(f"Skipped {dangling} relationship(s) with unresolved targets")

        return Graph(nodes=nodes, links=links)


def filter_graph(graph: Graph, allowed_types: Iterable[NodeType | str]) -> Graph:
    """
    Keep only nodes whose type is allowed and links whose endpoints both survive.

    The source graph is left untouched; the result holds copies.
    """
    allowed = {NodeType(t) for t in allowed_types}
    nodes = [node.model_copy() for node in graph.nodes if node.node_type in allowed]
    kept_ids = {node.id for node in nodes}
    links = [
        link for link in graph.links
        if link.source in kept_ids and link.target in kept_ids
    ]
    return Graph(nodes=nodes, links=links)


class GraphIndex:
    """
    Read-only connectivity index over a built graph.

    Maps string node ids to rustworkx indices so degree and component
    queries stay cheap on large snapshots.
    """

    def __init__(self, graph: Graph):
        self._graph = rx.PyDiGraph(multigraph=True)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}
        self._nodes_by_type: Dict[NodeType, Set[str]] = defaultdict(set)

        for node in graph.nodes:
            idx = self._graph.add_node(node.id)
            self._id_to_idx[node.id] = idx
            self._idx_to_id[idx] = node.id
            self._nodes_by_type[node.node_type].add(node.id)

        for link in graph.links:
            u = self._id_to_idx.get(link.source)
            v = self._id_to_idx.get(link.target)
            if u is None or v is None:
                continue
            self._graph.add_edge(u, v, None)

    def children(self, node_id: str) -> List[str]:
        """Ids this node links to, in graph node order."""
        if node_id not in self._id_to_idx:
            return []
        idx = self._id_to_idx[node_id]
        targets = [target for _, target, _ in self._graph.out_edges(idx)]
        return [self._idx_to_id[t] for t in sorted(targets)]

    def parents(self, node_id: str) -> List[str]:
        """Ids linking to this node."""
        if node_id not in self._id_to_idx:
            return []
        idx = self._id_to_idx[node_id]
        sources = [source for source, _, _ in self._graph.in_edges(idx)]
        return [self._idx_to_id[s] for s in sorted(sources)]

    def degree(self, node_id: str) -> int:
        if node_id not in self._id_to_idx:
            return 0
        idx = self._id_to_idx[node_id]
        return self._graph.in_degree(idx) + self._graph.out_degree(idx)

    def connected_count(self, node_id: str) -> int:
        """
        Number of distinct neighbours, in either direction.

        Outgoing links count too, so a document reports its children rather
        than only the (usually absent) links pointing at it.
        """
        return len(set(self.children(node_id)) | set(self.parents(node_id)))

    def orphans(self) -> List[str]:
        """Nodes without any link."""
        return [
            self._idx_to_id[idx] for idx in self._graph.node_indices()
            if self._graph.in_degree(idx) == 0 and self._graph.out_degree(idx) == 0
        ]

    def components(self) -> List[Set[str]]:
        """Weakly connected components, largest first."""
        if self._graph.num_nodes() == 0:
            return []
        components = rx.weakly_connected_components(self._graph)
        result = [{self._idx_to_id[idx] for idx in comp} for comp in components]
        return sorted(result, key=lambda c: (-len(c), sorted(c)))

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def link_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, Any]:
        return {
            "total_nodes": self.node_count,
            "total_links": self.link_count,
            "nodes_by_type": {
                node_type.value: len(ids)
                for node_type, ids in sorted(self._nodes_by_type.items())
            },
            "orphans": len(self.orphans()),
            "components": len(self.components()),
        }
