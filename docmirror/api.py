"""High-level API for docmirror.

This module provides simple, functional interfaces for the common
operations: enumerating a remote tree, filtering it by content category
and keeping a local cache directory in step with it. These functions wrap
the traverser, collectors and Reconciler for ease of use in simple cases.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from ._common.config import DEFAULT_COLUMNS, MirrorConfig, TraversalConfig
from .classify import Category, classify
from .core.adapter import CopyPrimitive, CursorAdapter
from .core.collector import FileEntryCollector, RowCountCollector, RowFilter, category_filter
from .core.node import DirectoryRow, DocumentReference, NodeIdentity
from .core.projection import ColumnProjection, DocumentColumn
from .core.traverser import BreadthFirstRowTraverser
from .error_policies import ErrorPolicy
from .exceptions import DocMirrorError, ListingUnavailableError, TraversalCancelledError
from .reconcile import Reconciler


logger = logging.getLogger(__name__)

Columns = Iterable[Union[str, DocumentColumn]]


@dataclass
class TraversalOutcome:
    """How a traversal ended.

    Attributes:
        completed: True if every queued directory was listed
        rows_emitted: Rows handed to the callback, aborted or not
        error: ListingUnavailableError or TraversalCancelledError that
            ended the walk early, None when completed
    """
    completed: bool
    rows_emitted: int = 0
    error: Optional[DocMirrorError] = None

    @property
    def aborted(self) -> bool:
        return not self.completed


def iter_rows(
    root: NodeIdentity,
    adapter: CursorAdapter,
    columns: Optional[Columns] = None,
    recursive: bool = True,
    config: Optional[TraversalConfig] = None,
) -> Iterator[DirectoryRow]:
    """Stream the rows of a remote tree.

    Rows are produced in breadth-first order while the walk continues.

    Args:
        root: Tree root (or directory) to start from
        adapter: Cursor adapter for the remote store
        columns: Columns wanted in each row (default: id, mime type,
            last modified); ignored when ``config`` is given
        recursive: Expand subdirectories; ignored when ``config`` is given
        config: Full traversal configuration

    Yields:
        DirectoryRow for every node found

    Raises:
        ListingUnavailableError: When a directory can't be listed
        TraversalCancelledError: When ``config.cancel_check`` fires

    Example:
        >>> for row in iter_rows(provider.root_node(), provider):
        ...     print(row.reference, row.is_directory)
    """
    if config is None:
        config = TraversalConfig(
            projection=ColumnProjection(DEFAULT_COLUMNS if columns is None else columns),
            recursive=recursive,
        )
    errors = config.validate()
    if errors:
        raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

    traverser = BreadthFirstRowTraverser(adapter, cancel_check=config.cancel_check)
    yield from traverser.traverse(root, config.projection, recursive=config.recursive)


def traverse(
    root: NodeIdentity,
    adapter: CursorAdapter,
    on_row: Callable[[DirectoryRow], Any],
    columns: Optional[Columns] = None,
    recursive: bool = True,
    config: Optional[TraversalConfig] = None,
) -> TraversalOutcome:
    """Walk a remote tree, calling ``on_row`` for every node.

    The first directory that can't be listed ends the walk; rows already
    passed to ``on_row`` stand. That is reported through the outcome, not
    raised.

    Args:
        root: Tree root (or directory) to start from
        adapter: Cursor adapter for the remote store
        on_row: Called synchronously, in discovery order, once per row
        columns: Columns wanted in each row; ignored when ``config`` is given
        recursive: Expand subdirectories; ignored when ``config`` is given
        config: Full traversal configuration

    Returns:
        TraversalOutcome
    """
    if config is None:
        config = TraversalConfig(
            projection=ColumnProjection(DEFAULT_COLUMNS if columns is None else columns),
            recursive=recursive,
        )

    emitted = 0
    try:
        for row in iter_rows(root, adapter, config=config):
            on_row(row)
            emitted += 1
            if config.progress_callback and emitted % config.progress_interval == 0:
                config.progress_callback(emitted)
    except (ListingUnavailableError, TraversalCancelledError) as e:
        logger.warning("Traversal of %s aborted after %d rows: %s", root, emitted, e)
        return TraversalOutcome(completed=False, rows_emitted=emitted, error=e)

    return TraversalOutcome(completed=True, rows_emitted=emitted)


def list_files(
    root: NodeIdentity,
    adapter: CursorAdapter,
    columns: Columns = DEFAULT_COLUMNS,
) -> Iterator[Dict[str, Any]]:
    """Stream the immediate children of ``root`` as plain dicts.

    Args:
        root: Directory to list
        adapter: Cursor adapter for the remote store
        columns: Columns by member, raw key or display name

    Yields:
        ``{"data": {...}, "metadata": {...}}`` per child
    """
    for row in iter_rows(root, adapter, columns=columns, recursive=False):
        yield row.as_dict()


def find_file_references(
    root: NodeIdentity,
    adapter: CursorAdapter,
    category: Union[str, Category] = Category.ANY,
) -> List[str]:
    """References of every file below ``root`` in a content category.

    Raises:
        ListingUnavailableError: When a directory can't be listed
    """
    collector = FileEntryCollector(category_filter(category))
    for row in iter_rows(root, adapter, recursive=True):
        collector(row)
    return [str(entry.reference) for entry in collector.entries]


def get_tree_stats(root: NodeIdentity, adapter: CursorAdapter) -> Dict[str, int]:
    """Count the files, directories and unknown nodes below ``root``.

    Raises:
        ListingUnavailableError: When a directory can't be listed
    """
    counter = RowCountCollector()
    for row in iter_rows(root, adapter, recursive=True):
        counter(row)
    return counter.results


def reconcile_mirror(
    remote_root: NodeIdentity,
    cache_dir: Union[str, Path],
    adapter: CursorAdapter,
    copier: Optional[CopyPrimitive] = None,
    include_filter: Optional[RowFilter] = None,
    error_policy: Optional[ErrorPolicy] = None,
    on_complete: Optional[Callable[[Any], None]] = None,
) -> List[Path]:
    """Make ``cache_dir`` a flat mirror of the files below ``remote_root``.

    Cached files with no remote counterpart are deleted, then every remote
    file is copied again. Running it twice against an unchanged tree
    leaves the same files behind.

    Args:
        remote_root: Remote subtree to mirror
        cache_dir: Local cache directory (created when missing)
        adapter: Cursor adapter for the remote store
        copier: Copy primitive (default: ``adapter`` if it is one)
        include_filter: Optional predicate restricting mirrored files
        error_policy: Handling of per-file failures
        on_complete: Called with the ReconcileReport after the pass

    Returns:
        Paths of the files copied

    Raises:
        ListingUnavailableError: If the remote walk was aborted; nothing
            local has been changed in that case
    """
    config = MirrorConfig.mirror(
        cache_dir,
        include_filter=include_filter,
        error_policy=error_policy,
        on_complete=on_complete,
    )
    reconciler = Reconciler(adapter, _copier_for(adapter, copier), config)
    return reconciler.run(remote_root).copied


def reconcile_filtered(
    remote_root: NodeIdentity,
    cache_dir: Union[str, Path],
    category: Union[str, Category],
    adapter: CursorAdapter,
    copier: Optional[CopyPrimitive] = None,
    error_policy: Optional[ErrorPolicy] = None,
    on_complete: Optional[Callable[[Any], None]] = None,
) -> List[Path]:
    """Copy every file of one category below ``remote_root`` into ``cache_dir``.

    Unlike :func:`reconcile_mirror` nothing is evicted.

    Returns:
        Paths of the files copied

    Raises:
        ListingUnavailableError: If the remote walk was aborted
    """
    config = MirrorConfig.filtered(
        cache_dir, category, error_policy=error_policy, on_complete=on_complete
    )
    reconciler = Reconciler(adapter, _copier_for(adapter, copier), config)
    return reconciler.run(remote_root).copied


def cache_single_file(
    reference: Union[str, DocumentReference],
    cache_dir: Union[str, Path],
    copier: CopyPrimitive,
) -> Optional[Path]:
    """Copy one document into ``cache_dir`` under its inferred name.

    Returns:
        Path of the copy, or None if no name could be inferred or the
        copy failed
    """
    if isinstance(reference, str):
        reference = DocumentReference.parse(reference)
    filename = reference.name
    if filename is None:
        logger.warning("Cannot infer a filename for %s", reference)
        return None
    try:
        return copier.copy(reference, Path(cache_dir), filename)
    except Exception as e:
        logger.warning("Could not cache %s: %s", reference, e)
        return None


def _copier_for(adapter: CursorAdapter, copier: Optional[CopyPrimitive]) -> CopyPrimitive:
    if copier is not None:
        return copier
    if isinstance(adapter, CopyPrimitive):
        return adapter
    raise TypeError(f"{adapter.__class__.__name__} cannot copy files; pass a copier")


__all__ = [
    'TraversalOutcome',
    'iter_rows',
    'traverse',
    'list_files',
    'find_file_references',
    'get_tree_stats',
    'reconcile_mirror',
    'reconcile_filtered',
    'cache_single_file',
    'classify',
]
