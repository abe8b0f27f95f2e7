"""Change classification and comparison orchestration."""

from .comparison import (
    EMPTY_DOCSTORE_MESSAGE,
    Comparison,
    compare_docstores,
    compare_files,
    load_docstore,
    parse_docstore,
)
from .diff_classifier import ChangeSet, DiffClassifier, ModifiedNode

__all__ = [
    "EMPTY_DOCSTORE_MESSAGE",
    "ChangeSet",
    "Comparison",
    "DiffClassifier",
    "ModifiedNode",
    "compare_docstores",
    "compare_files",
    "load_docstore",
    "parse_docstore",
]
