"""Column projection for directory listings.

A projection names the metadata fields a caller wants for every listed row.
Providers key their raw rows by column key (``_display_name``,
``last_modified`` ...); rows handed back to callers use display names
(``displayName``, ``lastModified`` ...).
"""

from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Tuple, Union


class DocumentColumn(Enum):
    """Metadata columns a provider can serve.

    The value is the provider's raw column key.
    """
    DOCUMENT_ID = "document_id"
    DISPLAY_NAME = "_display_name"
    MIME_TYPE = "mime_type"
    SUMMARY = "summary"
    LAST_MODIFIED = "last_modified"
    SIZE = "_size"

    @property
    def key(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    def coerce(self, value: Any) -> Any:
        """Convert a raw cell to the column's Python type.

        Raises:
            ValueError, TypeError: If the cell can't be converted
        """
        if self in _INTEGER_COLUMNS:
            return int(value)
        return str(value)

    @classmethod
    def parse(cls, name: Union[str, 'DocumentColumn']) -> Optional['DocumentColumn']:
        """Look up a column by raw key, display name or enum member name."""
        if isinstance(name, cls):
            return name
        for column in cls:
            if name in (column.value, column.display_name, column.name):
                return column
        return None


_DISPLAY_NAMES = {
    DocumentColumn.DOCUMENT_ID: "id",
    DocumentColumn.DISPLAY_NAME: "displayName",
    DocumentColumn.MIME_TYPE: "mimeType",
    DocumentColumn.SUMMARY: "summary",
    DocumentColumn.LAST_MODIFIED: "lastModified",
    DocumentColumn.SIZE: "size",
}

_INTEGER_COLUMNS = frozenset({DocumentColumn.LAST_MODIFIED, DocumentColumn.SIZE})

# Columns the engine needs to build child references and detect directories.
ENGINE_COLUMNS: Tuple[DocumentColumn, ...] = (
    DocumentColumn.MIME_TYPE,
    DocumentColumn.DOCUMENT_ID,
)


class ColumnProjection:
    """Ordered, duplicate-free set of caller-requested columns."""

    def __init__(self, columns: Iterable[Union[str, DocumentColumn]] = ()):
        """Build a projection.

        Args:
            columns: Columns given as DocumentColumn members, raw keys or
                display names

        Raises:
            ValueError: If a column name is not recognised
        """
        requested: List[DocumentColumn] = []
        for name in columns:
            column = DocumentColumn.parse(name)
            if column is None:
                raise ValueError(f"Unknown document column: {name!r}")
            if column not in requested:
                requested.append(column)
        self._columns: Tuple[DocumentColumn, ...] = tuple(requested)

    @classmethod
    def all(cls) -> 'ColumnProjection':
        return cls(DocumentColumn)

    @property
    def columns(self) -> Tuple[DocumentColumn, ...]:
        return self._columns

    def effective(self, recursive: bool) -> Tuple[DocumentColumn, ...]:
        """Columns to actually query.

        Recursion needs the document id and mime type of every row, so
        those are appended when missing. Root-only listings add only the
        document id, without which no row reference can be built.
        """
        required = ENGINE_COLUMNS if recursive else (DocumentColumn.DOCUMENT_ID,)
        extra = tuple(c for c in required if c not in self._columns)
        return self._columns + extra

    def keys(self, recursive: bool = False) -> List[str]:
        """Raw column keys of :meth:`effective`."""
        return [column.key for column in self.effective(recursive)]

    def __contains__(self, column: object) -> bool:
        return column in self._columns

    def __iter__(self) -> Iterator[DocumentColumn]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnProjection):
            return NotImplemented
        return self._columns == other._columns

    def __hash__(self) -> int:
        return hash(self._columns)

    def __repr__(self) -> str:
        names = ", ".join(column.name for column in self._columns)
        return f"ColumnProjection([{names}])"
