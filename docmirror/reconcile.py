"""Cache reconciliation for docmirror.

The Reconciler keeps a flat local cache directory consistent, by filename,
with the files of a remote subtree:

1. walk the remote subtree and collect the files of interest
2. index the cache directory
3. evict cached files whose name no remote file has (mirror mode only)
4. copy every remote file of interest into the cache, unconditionally

A listing failure during step 1 aborts the pass before anything local is
touched. Failures of individual deletes and copies go to the configured
ErrorPolicy and, by default, only leave the file out of the result.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ._common.config import MirrorConfig, TraversalConfig
from .cache import build_index
from .classify import Category
from .core.adapter import CopyPrimitive, CursorAdapter
from .core.collector import FileEntry, FileEntryCollector, RowFilter, category_filter
from .core.node import DirectoryRow, NodeIdentity
from .core.traverser import BreadthFirstRowTraverser
from .error_policies import ContinueOnErrorsPolicy, ErrorPolicy
from .exceptions import CopyFailedError
from .planning import SyncPlan, compute_plan


logger = logging.getLogger(__name__)


@dataclass
class ReconcileReport:
    """Result of a reconciliation pass.

    Attributes:
        copied: Local paths written by successful copies
        deleted: Local files evicted
        failed_copies: Remote files that could not be copied
        failed_deletes: Local files that could not be evicted
        skipped: Remote files ignored because no filename could be inferred
    """
    copied: List[Path] = field(default_factory=list)
    deleted: List[Path] = field(default_factory=list)
    failed_copies: List[FileEntry] = field(default_factory=list)
    failed_deletes: List[Path] = field(default_factory=list)
    skipped: int = 0

    @property
    def ok(self) -> bool:
        """``True`` if every planned copy and delete succeeded."""
        return not self.failed_copies and not self.failed_deletes


class Reconciler:
    """Plans and executes one cache reconciliation pass.

    The same class covers mirroring (``evict=True``) and filtered caching
    (``evict=False`` plus a category or predicate). Instances hold no
    state between passes, but concurrent passes against one cache
    directory must be serialised by the caller.
    """

    def __init__(self,
                 adapter: CursorAdapter,
                 copier: CopyPrimitive,
                 config: MirrorConfig,
                 traversal: Optional[TraversalConfig] = None):
        """Create a reconciler.

        Args:
            adapter: Lists the remote tree
            copier: Copies remote files into the cache
            config: What to reconcile and how
            traversal: Traversal options; only ``cancel_check`` is used,
                the walk is always recursive

        Raises:
            ValueError: If the configuration is invalid
        """
        errors = config.validate()
        if errors:
            raise ValueError(f"Invalid configuration: {'; '.join(errors)}")

        self.adapter = adapter
        self.copier = copier
        self.config = config
        self.traversal = traversal or TraversalConfig()
        self.policy: ErrorPolicy = config.error_policy or ContinueOnErrorsPolicy()

    @property
    def cache_dir(self) -> Path:
        return Path(self.config.cache_dir)

    def _row_filter(self) -> Optional[RowFilter]:
        filters = []
        if self.config.category is not Category.ANY:
            filters.append(category_filter(self.config.category))
        if self.config.include_filter is not None:
            filters.append(self.config.include_filter)
        if not filters:
            return None

        def _accept(row: DirectoryRow) -> bool:
            return all(f(row) for f in filters)

        return _accept

    def collect(self, remote_root: NodeIdentity) -> FileEntryCollector:
        """Walk the remote subtree and gather the files of interest.

        Raises:
            ListingUnavailableError: If any directory can't be listed
        """
        collector = FileEntryCollector(self._row_filter())
        traverser = BreadthFirstRowTraverser(
            self.adapter, cancel_check=self.traversal.cancel_check
        )
        for row in traverser.traverse(remote_root, self.traversal.projection, recursive=True):
            collector(row)

        logger.debug("Collected %d files below %s (%d without a name)",
                     len(collector.entries), remote_root, collector.skipped)
        return collector

    def plan(self, remote_root: NodeIdentity) -> SyncPlan:
        """Compute the plan for ``remote_root`` without executing it."""
        plan, _ = self._plan(remote_root)
        return plan

    def _plan(self, remote_root: NodeIdentity):
        collector = self.collect(remote_root)
        index = build_index(self.cache_dir) if self.config.evict else {}
        plan = compute_plan(collector.entries, index, evict=self.config.evict)
        logger.debug("Plan for %s: %d to delete, %d to copy",
                     self.cache_dir, len(plan.to_delete), len(plan.to_copy))
        return plan, collector.skipped

    def execute(self, plan: SyncPlan) -> ReconcileReport:
        """Evict, then copy forward, as ``plan`` says."""
        report = ReconcileReport()

        for path in plan.to_delete:
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                report.failed_deletes.append(path)
                self.policy.handle(e, 'delete', path)
                continue
            report.deleted.append(path)

        for entry in plan.to_copy:
            try:
                copied = self.copier.copy(entry.reference, self.cache_dir, entry.filename)
                if copied is None:
                    raise CopyFailedError(entry.reference, self.cache_dir / entry.filename)
            except Exception as e:
                report.failed_copies.append(entry)
                self.policy.handle(e, 'copy', entry.reference)
                continue
            report.copied.append(Path(copied))

        return report

    def run(self, remote_root: NodeIdentity) -> ReconcileReport:
        """Plan and execute one pass.

        Raises:
            ListingUnavailableError: If the remote walk was aborted; the
                cache directory is left untouched in that case
        """
        plan, skipped = self._plan(remote_root)
        report = self.execute(plan)
        report.skipped = skipped

        logger.info("Reconciled %s into %s: %d copied, %d deleted, %d failed",
                    remote_root, self.cache_dir, len(report.copied), len(report.deleted),
                    len(report.failed_copies) + len(report.failed_deletes))

        if self.config.on_complete is not None:
            self.config.on_complete(report)
        return report
