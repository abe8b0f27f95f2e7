"""
Comparison orchestration.

Loads two snapshot documents, runs extraction and classification, builds the
before/after graphs and applies the one user-facing policy check: two
snapshots that yield no nodes at all are not a usable comparison.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from ..core.extractor import NodeExtractor
from ..core.graph import GraphModelBuilder
from ..core.result import Err, Ok, Result, and_then
from ..core.types import DocstoreNode, Graph
from .diff_classifier import ChangeSet, DiffClassifier

logger = logging.getLogger(__name__)

EMPTY_DOCSTORE_MESSAGE = "Files do not contain a valid docstore format, or no nodes were found."
INVALID_JSON_MESSAGE = "Invalid JSON file."
READ_FAILURE_MESSAGE = "Failed to read file."


@dataclass
class Comparison:
    """Everything derived from one before/after run."""
    before_nodes: Dict[str, DocstoreNode]
    after_nodes: Dict[str, DocstoreNode]
    changes: ChangeSet
    before_graph: Graph
    after_graph: Graph

    def graph_for(self, view: str) -> Graph:
        """Graph for the 'before' or 'after' view."""
        if view == "before":
            return self.before_graph
        if view == "after":
            return self.after_graph
        raise ValueError(f"Unknown view: {view!r} (expected 'before' or 'after')")


def parse_docstore(text: str) -> Result[Any, str]:
    """Parse snapshot JSON text."""
    try:
        return Ok(json.loads(text))
    except (json.JSONDecodeError, TypeError) as e:
        logger.debug(f"JSON parse failure: {e}")
        return Err(INVALID_JSON_MESSAGE)


def load_docstore(path: Path | str) -> Result[Any, str]:
    """Read and parse a snapshot file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Failed to read {path}: {e}")
        return Err(READ_FAILURE_MESSAGE)
    return parse_docstore(text)


def compare_docstores(before_document: Any, after_document: Any) -> Result[Comparison, str]:
    """
    Run a full comparison over two already-parsed snapshot documents.

    Returns Err with a single human-readable message when neither snapshot
    contains recognisable docstore content.
    """
    extractor = NodeExtractor()
    before_nodes = extractor.extract(before_document)
    after_nodes = extractor.extract(after_document)

    if not before_nodes and not after_nodes:
        return Err(EMPTY_DOCSTORE_MESSAGE)

    changes = DiffClassifier().classify(before_nodes, after_nodes)
    builder = GraphModelBuilder()

    logger.debug(
        f"Compared {len(before_nodes)} -> {len(after_nodes)} nodes: {changes.counts}"
    )

    return Ok(Comparison(
        before_nodes=before_nodes,
        after_nodes=after_nodes,
        changes=changes,
        # The before view has no diff context
        before_graph=builder.build(before_nodes, None),
        after_graph=builder.build(after_nodes, changes.status_lookup),
    ))


def compare_files(before_path: Path | str, after_path: Path | str) -> Result[Comparison, str]:
    """Load both snapshot files and compare them."""
    before = load_docstore(before_path)
    if before.is_err():
        return before

    return and_then(
        load_docstore(after_path),
        lambda after_document: compare_docstores(before.unwrap(), after_document),
    )
