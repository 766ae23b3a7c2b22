"""Core abstractions for docmirror.

This module contains the node types, the adapter interfaces, the
breadth-first traverser and the row collectors everything else builds on.
"""

from .node import (
    DIRECTORY_MIME_TYPE,
    ChildListingHandle,
    DirectoryRow,
    DocumentReference,
    NodeIdentity,
)
from .projection import ColumnProjection, DocumentColumn
from .adapter import CopyPrimitive, CursorAdapter
from .traverser import BreadthFirstRowTraverser, RowTraverser, TraversalQueue
from .collector import (
    FileEntry,
    FileEntryCollector,
    RowCollector,
    RowCountCollector,
    RowListCollector,
    category_filter,
)

__all__ = [
    "DIRECTORY_MIME_TYPE",
    "ChildListingHandle",
    "DirectoryRow",
    "DocumentReference",
    "NodeIdentity",
    "ColumnProjection",
    "DocumentColumn",
    "CopyPrimitive",
    "CursorAdapter",
    "BreadthFirstRowTraverser",
    "RowTraverser",
    "TraversalQueue",
    "FileEntry",
    "FileEntryCollector",
    "RowCollector",
    "RowCountCollector",
    "RowListCollector",
    "category_filter",
]
