"""docmirror - enumerate and mirror remote document trees.

docmirror walks a remote, permission-gated document tree through a narrow
paged listing interface, filters what it finds by content category, and
keeps a flat local cache directory consistent with a remote subtree.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from docmirror import reconcile_mirror
    from docmirror.adapters import LocalDocumentProvider

    provider = LocalDocumentProvider("/mnt/share/music")
    reconcile_mirror(provider.root_node(), "cache/music", provider)
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .core import (
    BreadthFirstRowTraverser,
    ChildListingHandle,
    ColumnProjection,
    CopyPrimitive,
    CursorAdapter,
    DirectoryRow,
    DocumentColumn,
    DocumentReference,
    FileEntry,
    FileEntryCollector,
    NodeIdentity,
    RowCountCollector,
    RowListCollector,
    TraversalQueue,
    category_filter,
)
from ._common import MirrorConfig, TraversalConfig
from .classify import Category, classify, matches
from .cache import build_index, cached_file_paths, clear_cached_files
from .planning import SyncPlan, compute_plan
from .reconcile import ReconcileReport, Reconciler
from .error_policies import (
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
    ErrorPolicy,
    FailFastPolicy,
    ThresholdPolicy,
)
from .exceptions import (
    CapabilityMismatchError,
    CopyFailedError,
    DocMirrorError,
    InvalidReferenceError,
    ListingUnavailableError,
    TraversalCancelledError,
)
from .api import (
    TraversalOutcome,
    cache_single_file,
    find_file_references,
    get_tree_stats,
    iter_rows,
    list_files,
    reconcile_filtered,
    reconcile_mirror,
    traverse,
)

__all__ = [
    "__version__",
    # Core
    "BreadthFirstRowTraverser",
    "ChildListingHandle",
    "ColumnProjection",
    "CopyPrimitive",
    "CursorAdapter",
    "DirectoryRow",
    "DocumentColumn",
    "DocumentReference",
    "FileEntry",
    "FileEntryCollector",
    "NodeIdentity",
    "RowCountCollector",
    "RowListCollector",
    "TraversalQueue",
    "category_filter",
    # Config
    "MirrorConfig",
    "TraversalConfig",
    # Classification and cache
    "Category",
    "classify",
    "matches",
    "build_index",
    "cached_file_paths",
    "clear_cached_files",
    # Reconciliation
    "SyncPlan",
    "compute_plan",
    "ReconcileReport",
    "Reconciler",
    # Errors
    "CollectErrorsPolicy",
    "ContinueOnErrorsPolicy",
    "ErrorPolicy",
    "FailFastPolicy",
    "ThresholdPolicy",
    "CapabilityMismatchError",
    "CopyFailedError",
    "DocMirrorError",
    "InvalidReferenceError",
    "ListingUnavailableError",
    "TraversalCancelledError",
    # API
    "TraversalOutcome",
    "cache_single_file",
    "find_file_references",
    "get_tree_stats",
    "iter_rows",
    "list_files",
    "reconcile_filtered",
    "reconcile_mirror",
    "traverse",
]
