"""Configuration system for docmirror.

This module defines how callers describe a traversal (which columns, how
deep, how to stop early) and a reconciliation pass (where the cache lives,
which files are of interest, what to do about stale files and failures).
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from ..classify import Category
from ..core.collector import RowFilter
from ..core.projection import ColumnProjection, DocumentColumn
from ..error_policies import ErrorPolicy


# Columns fetched when the caller doesn't say otherwise.
DEFAULT_COLUMNS = (
    DocumentColumn.DOCUMENT_ID,
    DocumentColumn.MIME_TYPE,
    DocumentColumn.LAST_MODIFIED,
)


@dataclass
class TraversalConfig:
    """Complete configuration for one traversal."""

    # Columns returned in every row
    projection: ColumnProjection = field(
        default_factory=lambda: ColumnProjection(DEFAULT_COLUMNS)
    )

    # Expand subdirectories (False = immediate children of the root only)
    recursive: bool = True

    # Cooperative cancellation, checked before each directory expansion
    cancel_check: Optional[Callable[[], bool]] = None

    # Progress reporting
    progress_callback: Optional[Callable[[int], None]] = None
    progress_interval: int = 100  # Report every N rows

    @classmethod
    def root_only(cls, columns=DEFAULT_COLUMNS) -> 'TraversalConfig':
        """Create config listing only the immediate children of the root.

        Args:
            columns: Columns to fetch, as members, raw keys or display names

        Returns:
            TraversalConfig for a single listing
        """
        return cls(projection=ColumnProjection(columns), recursive=False)

    @classmethod
    def recursive_scan(cls, columns=DEFAULT_COLUMNS) -> 'TraversalConfig':
        """Create config walking the whole tree below the root.

        Args:
            columns: Columns to fetch, as members, raw keys or display names

        Returns:
            TraversalConfig for a full walk
        """
        return cls(projection=ColumnProjection(columns), recursive=True)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.progress_interval <= 0:
            errors.append("progress_interval must be positive")

        if self.cancel_check is not None and not callable(self.cancel_check):
            errors.append("cancel_check must be callable")

        if self.progress_callback is not None and not callable(self.progress_callback):
            errors.append("progress_callback must be callable")

        return errors


@dataclass
class MirrorConfig:
    """Configuration for one reconciliation pass into a cache directory."""

    # Local cache directory
    cache_dir: Union[str, Path] = ""

    # Which remote files are of interest
    category: Category = Category.ANY
    include_filter: Optional[RowFilter] = None

    # Delete cached files that no longer exist remotely
    evict: bool = True

    # Per-file failure handling (None = log and continue)
    error_policy: Optional[ErrorPolicy] = None

    # Called with the ReconcileReport once the pass has finished
    on_complete: Optional[Callable[[Any], None]] = None

    def __post_init__(self):
        self.category = Category.parse(self.category)
        if self.cache_dir != "":
            self.cache_dir = Path(self.cache_dir)

    @classmethod
    def mirror(cls, cache_dir: Union[str, Path], **kwargs) -> 'MirrorConfig':
        """Create config keeping ``cache_dir`` a mirror of the remote tree."""
        return cls(cache_dir=cache_dir, evict=True, **kwargs)

    @classmethod
    def filtered(cls,
                 cache_dir: Union[str, Path],
                 category: Union[str, Category],
                 **kwargs) -> 'MirrorConfig':
        """Create config pulling one category of files, without eviction."""
        return cls(cache_dir=cache_dir, category=category, evict=False, **kwargs)

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.cache_dir == "":
            errors.append("cache_dir is required")
        elif Path(self.cache_dir).exists() and not Path(self.cache_dir).is_dir():
            errors.append(f"cache_dir {self.cache_dir} is not a directory")

        if self.include_filter is not None and not callable(self.include_filter):
            errors.append("include_filter must be callable")

        if self.on_complete is not None and not callable(self.on_complete):
            errors.append("on_complete must be callable")

        return errors
