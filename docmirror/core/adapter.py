"""Adapter abstractions for docmirror.

The CursorAdapter is the only thing the traversal engine knows about the
remote store. It turns a child-listing handle into a forward-only sequence
of raw rows, hiding whatever paged query mechanism the store really uses.
The CopyPrimitive moves the bytes of one remote document into a local file;
the reconciler decides what to copy, never how.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, FrozenSet, Iterator, Mapping, Optional, Sequence

from .node import ChildListingHandle, DocumentReference
from .projection import DocumentColumn


RawRow = Mapping[str, Any]


class CursorAdapter(ABC):
    """Abstract adapter for listing directories of a remote document tree.

    Implementations back onto the store's paged query mechanism. The
    engine drives them one directory at a time and never asks for random
    access into the tree.
    """

    @abstractmethod
    def list_children(self,
                      handle: ChildListingHandle,
                      columns: Sequence[str]) -> Optional[Iterator[RawRow]]:
        """List the children of one directory.

        The returned iterator should be lazy, fetching further pages only
        as rows are consumed. If it has a ``close()`` method the engine
        calls it once the listing has been read or abandoned.

        Args:
            handle: Which directory to list
            columns: Raw column keys to include in every row

        Returns:
            Iterator of mappings keyed by raw column key, or None when the
            directory can't be listed (permission revoked, deleted, ...)

        Raises:
            ListingUnavailableError: Alternative way to report an
                unlistable directory
        """
        pass

    # Capability flags - adapters declare what they support

    def supported_columns(self) -> FrozenSet[DocumentColumn]:
        """Columns this adapter can fill in.

        Returns:
            All columns by default
        """
        return frozenset(DocumentColumn)


class CopyPrimitive(ABC):
    """Materialises one remote document as a local file."""

    @abstractmethod
    def copy(self,
             reference: DocumentReference,
             target_dir: Path,
             target_filename: str) -> Optional[Path]:
        """Copy a document into ``target_dir / target_filename``.

        Existing files are overwritten. ``target_dir`` is created when
        missing.

        Args:
            reference: Document to copy
            target_dir: Local directory to copy into
            target_filename: Name of the local file

        Returns:
            Path of the written file, or None when the copy failed

        Raises:
            OSError: Alternative way to report a failed copy
        """
        pass
