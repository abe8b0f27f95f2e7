"""
Diff Classifier - Classify node changes between two docstore snapshots.

Every id in the union of both snapshots gets exactly one status:
- ADDED: only in the after snapshot
- DELETED: only in the before snapshot
- MODIFIED: in both, content hashes differ
- UNCHANGED: in both, content hashes equal (two missing hashes are equal)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from ..core.types import ChangeStatus, DocstoreNode


@dataclass
class ModifiedNode:
    """A node present in both snapshots whose content hash changed."""
    before: DocstoreNode
    after: DocstoreNode

    @property
    def id(self) -> str:
        return self.after.id

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "before": self.before.to_dict(), "after": self.after.to_dict()}


@dataclass
class ChangeSet:
    """Complete classification of two snapshots."""
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    added: List[DocstoreNode] = field(default_factory=list)
    deleted: List[DocstoreNode] = field(default_factory=list)
    modified: List[ModifiedNode] = field(default_factory=list)
    unchanged: List[DocstoreNode] = field(default_factory=list)

    # Flat lookup used to colour the after graph
    status_lookup: Dict[str, ChangeStatus] = field(default_factory=dict)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.deleted or self.modified)

    @property
    def counts(self) -> Dict[str, int]:
        return {
            ChangeStatus.UNCHANGED.value: len(self.unchanged),
            ChangeStatus.ADDED.value: len(self.added),
            ChangeStatus.DELETED.value: len(self.deleted),
            ChangeStatus.MODIFIED.value: len(self.modified),
        }

    def ids_with_status(self, status: ChangeStatus) -> List[str]:
        return [node_id for node_id, s in self.status_lookup.items() if s == status]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": [n.to_dict() for n in self.added],
            "deleted": [n.to_dict() for n in self.deleted],
            "modified": [m.to_dict() for m in self.modified],
            "unchanged": [n.to_dict() for n in self.unchanged],
        }

    def to_markdown(self) -> str:
        """Generate a human-readable markdown report."""
        counts = self.counts
        lines = [
            "# Docstore Diff Report",
            f"Generated: {self.timestamp}",
            "",
            "## Summary",
            f"- Unchanged: {counts['unchanged']}",
            f"- Added: {counts['added']}",
            f"- Deleted: {counts['deleted']}",
            f"- Modified: {counts['modified']}",
            "",
        ]

        sections = [
            ("Added Nodes", [n.id for n in self.added]),
            ("Modified Nodes", [m.id for m in self.modified]),
            ("Deleted Nodes", [n.id for n in self.deleted]),
        ]
        for title, ids in sections:
            if not ids:
                continue
            lines.extend([f"## {title}", ""])
            lines.extend(f"- `{node_id}`" for node_id in ids)
            lines.append("")

        if not self.has_changes:
            lines.append("No changes detected.")

        return "\n".join(lines)


class DiffClassifier:
    """
    Compares two extracted node mappings.

    Pass 1 walks the after snapshot (unchanged / modified / added), pass 2
    walks the before snapshot for ids that disappeared. The partition only
    depends on set membership and hash equality.
    """

    def classify(
        self,
        before: Mapping[str, DocstoreNode],
        after: Mapping[str, DocstoreNode],
    ) -> ChangeSet:
        changes = ChangeSet()

        for node_id, after_node in after.items():
            before_node = before.get(node_id)
            if before_node is None:
                changes.added.append(after_node)
                changes.status_lookup[node_id] = ChangeStatus.ADDED
            elif before_node.content_hash == after_node.content_hash:
                changes.unchanged.append(after_node)
                changes.status_lookup[node_id] = ChangeStatus.UNCHANGED
            else:
                changes.modified.append(ModifiedNode(before=before_node, after=after_node))
                changes.status_lookup[node_id] = ChangeStatus.MODIFIED

        for node_id, before_node in before.items():
            if node_id in changes.status_lookup:
                continue
            changes.deleted.append(before_node)
            changes.status_lookup[node_id] = ChangeStatus.DELETED

        return changes
