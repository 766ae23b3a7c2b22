"""Sync planning for docmirror.

A SyncPlan is the diff between the remote files of interest and the local
cache index: which local files to evict and which remote files to copy.
It is computed once per reconciliation pass and discarded afterwards.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .cache import CacheIndex
from .core.collector import FileEntry


@dataclass
class SyncPlan:
    """What a reconciliation pass will do.

    Attributes:
        to_delete: Local files whose name no remote file has
        to_copy: Remote files to (re)materialise, in discovery order
    """
    to_delete: List[Path] = field(default_factory=list)
    to_copy: List[FileEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.to_delete) + len(self.to_copy)

    def filenames(self) -> List[str]:
        """Distinct target filenames, first occurrence order."""
        return list(dict.fromkeys(entry.filename for entry in self.to_copy))


def compute_plan(entries: Sequence[FileEntry],
                 index: CacheIndex,
                 evict: bool = True) -> SyncPlan:
    """Diff remote entries against a cache index.

    Files are matched by name only. Every remote entry is copied whether
    or not a file of that name is already cached; content changes are not
    detected here.

    Args:
        entries: Remote files of interest
        index: Current cache index
        evict: Plan deletion of cached names absent from ``entries``

    Returns:
        The plan to execute
    """
    plan = SyncPlan(to_copy=list(entries))
    if evict:
        remote_names = {entry.filename for entry in entries}
        plan.to_delete = [path for name, path in sorted(index.items())
                          if name not in remote_names]
    return plan
