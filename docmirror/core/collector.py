"""Row collection strategies for docmirror.

Collectors are the consumers traversal rows are streamed into. Each one is
callable with a single DirectoryRow, so an instance can be passed directly
as the ``on_row`` callback of a traversal.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Union

from ..classify import Category, matches
from .node import DirectoryRow, DocumentReference


RowFilter = Callable[[DirectoryRow], bool]


@dataclass(frozen=True)
class FileEntry:
    """A remote file and the local filename it is cached under."""
    reference: DocumentReference
    filename: str


def category_filter(category: Union[str, Category]) -> RowFilter:
    """Build a row filter accepting files of one content category.

    The row's mime type is used when the traversal fetched it, the
    inferred filename's extension otherwise.
    """
    category = Category.parse(category)

    def _accept(row: DirectoryRow) -> bool:
        return matches(category, row.mime_type, row.name or "")

    return _accept


class RowCollector(ABC):
    """Abstract base class for row consumers."""

    @abstractmethod
    def collect(self, row: DirectoryRow) -> None:
        """Consume one row.

        Args:
            row: Row emitted by the traversal
        """
        pass

    @property
    @abstractmethod
    def results(self) -> Any:
        """What has been collected so far."""
        pass

    def __call__(self, row: DirectoryRow) -> None:
        self.collect(row)


class RowListCollector(RowCollector):
    """Keeps every row in emission order."""

    def __init__(self):
        self.rows: List[DirectoryRow] = []

    def collect(self, row: DirectoryRow) -> None:
        self.rows.append(row)

    @property
    def results(self) -> List[DirectoryRow]:
        return self.rows


class FileEntryCollector(RowCollector):
    """Collects files that can be cached locally.

    Only rows known to be files are kept; directories and rows of unknown
    type are ignored. Files whose name can't be inferred from their
    reference are skipped and counted in ``skipped``.
    """

    def __init__(self, include_filter: Optional[RowFilter] = None):
        """Initialize collector.

        Args:
            include_filter: Optional predicate a file row must satisfy
        """
        self.include_filter = include_filter
        self.entries: List[FileEntry] = []
        self.skipped = 0

    def collect(self, row: DirectoryRow) -> None:
        if row.is_directory is not False:
            return
        filename = row.name
        if filename is None:
            self.skipped += 1
            return
        if self.include_filter is not None and not self.include_filter(row):
            return
        self.entries.append(FileEntry(row.reference, filename))

    @property
    def results(self) -> List[FileEntry]:
        return self.entries


class RowCountCollector(RowCollector):
    """Counts what a traversal discovered.

    Useful for logging a summary after a walk.
    """

    def __init__(self):
        self.total = 0
        self.files = 0
        self.directories = 0
        self.unknown = 0

    def collect(self, row: DirectoryRow) -> None:
        self.total += 1
        if row.is_directory is None:
            self.unknown += 1
        elif row.is_directory:
            self.directories += 1
        else:
            self.files += 1

    @property
    def results(self) -> dict:
        return {
            'total': self.total,
            'files': self.files,
            'directories': self.directories,
            'unknown': self.unknown,
        }
