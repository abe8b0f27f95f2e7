"""
Node Extractor - Normalize a raw docstore snapshot into canonical records.

A snapshot carries up to three optional sections:

1. `docstore/data`         node payloads, sometimes wrapped in `__data__`
2. `docstore/metadata`     per-id hashes and back-references
3. `docstore/ref_doc_info` per-document child index

Sections are applied in that order. Later sections may create or enrich
records but never overwrite a field an earlier section already derived,
except the child index, which defines document nodes outright.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..config import (
    DATA_ENVELOPE_KEY,
    DATA_SECTION,
    METADATA_SECTION,
    REF_DOC_INFO_SECTION,
)
from .types import DocstoreNode, NodeType, Relationship

logger = logging.getLogger(__name__)

DOCUMENT_CLASS_NAMES = {"Document", "ImageDocument"}


def _as_str(value: Any) -> Optional[str]:
    """Coerce a scalar id/hash to str; containers and empty values become None."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value)
    return text or None


def unwrap_payload(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the payload's real fields, unwrapping one `__data__` level if present."""
    inner = raw.get(DATA_ENVELOPE_KEY)
    if isinstance(inner, Mapping):
        return inner
    return raw


def node_type_for_class(class_name: Optional[str]) -> NodeType:
    """
    Map a payload class tag to a node type.

    Untagged payloads are text nodes; tags naming a document class are
    documents; every other chunk class (TextNode, ImageNode, IndexNode...)
    renders as a text node.
    """
    if not class_name:
        return NodeType.TEXT_NODE
    if class_name in DOCUMENT_CLASS_NAMES or class_name.endswith("Document"):
        return NodeType.DOCUMENT
    return NodeType.TEXT_NODE


def parse_relationships(raw: Any) -> List[Relationship]:
    """
    Normalize a relationships field into an ordered list.

    Accepts a mapping of relation kind -> entry (entries may themselves be
    lists, e.g. a CHILD relation), a plain list of entries, or bare id
    strings. Entries without a usable id are kept with `node_id=None`.
    """
    if isinstance(raw, Mapping):
        items = [(str(kind), entry) for kind, entry in raw.items()]
    elif isinstance(raw, list):
        items = [(None, entry) for entry in raw]
    else:
        return []

    relationships: List[Relationship] = []
    for kind, entry in items:
        entries = entry if isinstance(entry, list) else [entry]
        for item in entries:
            if isinstance(item, Mapping):
                node_id = _as_str(item.get("node_id"))
            else:
                node_id = _as_str(item)
            relationships.append(Relationship(kind=kind, node_id=node_id))
    return relationships


class NodeExtractor:
    """
    Parses one raw snapshot document into a mapping of canonical node records.

    Extraction is total: anything that is not a recognised section or entry
    is skipped, and an unusable document yields an empty mapping.
    """

    def __init__(self):
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def extract(self, document: Any) -> Dict[str, DocstoreNode]:
        if not isinstance(document, Mapping):
            self._logger.debug(f"Ignoring non-object snapshot ({type(document).__name__})")
            return {}

        nodes: Dict[str, DocstoreNode] = {}
        self._extract_payloads(self._section(document, DATA_SECTION), nodes)
        self._extract_metadata(self._section(document, METADATA_SECTION), nodes)
        self._extract_documents(self._section(document, REF_DOC_INFO_SECTION), nodes)

        self._logger.debug(f"Extracted {len(nodes)} nodes")
        return nodes

    def _section(self, document: Mapping[str, Any], name: str) -> Mapping[str, Any]:
        section = document.get(name)
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            self._logger.debug(f"Skipping section {name}: expected an object")
            return {}
        return section

    def _extract_payloads(self, section: Mapping[str, Any], nodes: Dict[str, DocstoreNode]) -> None:
        for node_id, raw in section.items():
            if not isinstance(raw, Mapping):
                self._logger.debug(f"Skipping payload {node_id}: expected an object")
                continue

            data = unwrap_payload(raw)
            class_name = _as_str(data.get("class_name"))
            text = data.get("text")
            nodes[node_id] = DocstoreNode(
                id=node_id,
                node_type=node_type_for_class(class_name),
                content_hash=_as_str(data.get("hash")) or _as_str(data.get("doc_hash")),
                ref_doc_id=_as_str(data.get("ref_doc_id")),
                relationships=parse_relationships(data.get("relationships")),
                class_name=class_name,
                text=text if isinstance(text, str) else None,
            )

    def _extract_metadata(self, section: Mapping[str, Any], nodes: Dict[str, DocstoreNode]) -> None:
        for node_id, meta in section.items():
            if not isinstance(meta, Mapping):
                self._logger.debug(f"Skipping metadata {node_id}: expected an object")
                continue

            doc_hash = _as_str(meta.get("doc_hash"))
            ref_doc_id = _as_str(meta.get("ref_doc_id"))
            existing = nodes.get(node_id)

            if existing is None:
                # No payload: only hash and back-reference are known.
                nodes[node_id] = DocstoreNode(
                    id=node_id,
                    node_type=NodeType.DOCUMENT,
                    content_hash=doc_hash,
                    doc_hash=doc_hash,
                    ref_doc_id=ref_doc_id,
                )
                continue

            update: Dict[str, Any] = {"doc_hash": doc_hash}
            if existing.ref_doc_id is None and ref_doc_id is not None:
                update["ref_doc_id"] = ref_doc_id
            if existing.content_hash is None:
                update["content_hash"] = doc_hash
            nodes[node_id] = existing.model_copy(update=update)

    def _extract_documents(self, section: Mapping[str, Any], nodes: Dict[str, DocstoreNode]) -> None:
        for doc_id, info in section.items():
            child_ids = info.get("node_ids") if isinstance(info, Mapping) else None
            if not isinstance(child_ids, list):
                child_ids = []

            nodes[doc_id] = DocstoreNode(
                id=doc_id,
                node_type=NodeType.DOCUMENT,
                content_hash=None,
                ref_doc_id=doc_id,
                relationships=[
                    Relationship(kind="child", node_id=child_id)
                    for child_id in (_as_str(c) for c in child_ids)
                    if child_id
                ],
            )
