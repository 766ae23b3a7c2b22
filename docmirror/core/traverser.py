"""Breadth-first traversal of a remote document tree.

The traverser walks the tree through a CursorAdapter one directory listing
at a time. Pending directories wait in an explicit FIFO queue instead of on
the call stack, so arbitrarily deep trees are fine and rows can be handed
to the caller while the walk is still going.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from contextlib import closing
from typing import Callable, Deque, Iterator, Optional, Sequence, Set, Tuple

from ..exceptions import (
    CapabilityMismatchError,
    ListingUnavailableError,
    TraversalCancelledError,
)
from .adapter import CursorAdapter, RawRow
from .node import DIRECTORY_MIME_TYPE, ChildListingHandle, DirectoryRow, NodeIdentity
from .projection import ColumnProjection, DocumentColumn


logger = logging.getLogger(__name__)


class TraversalQueue:
    """FIFO of directories waiting to be expanded.

    Each child-listing handle is accepted at most once per queue, so every
    directory is expanded exactly once even if a provider reports it twice.
    """

    def __init__(self):
        self._pending: Deque[Tuple[NodeIdentity, ChildListingHandle]] = deque()
        self._seen: Set[ChildListingHandle] = set()

    def push(self, parent: NodeIdentity, handle: ChildListingHandle) -> bool:
        """Queue a directory for expansion.

        Returns:
            False if the handle was queued before and was ignored
        """
        if handle in self._seen:
            return False
        self._seen.add(handle)
        self._pending.append((parent, handle))
        return True

    def pop(self) -> Tuple[NodeIdentity, ChildListingHandle]:
        """Remove and return the oldest pending expansion."""
        return self._pending.popleft()

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)


class RowTraverser(ABC):
    """Abstract base class for row traversal strategies."""

    def __init__(self, adapter: CursorAdapter):
        """Initialize traverser with an adapter.

        Args:
            adapter: CursorAdapter for listing directories
        """
        self.adapter = adapter

    @abstractmethod
    def traverse(self,
                 root: NodeIdentity,
                 projection: ColumnProjection,
                 recursive: bool = True) -> Iterator[DirectoryRow]:
        """Walk the tree below ``root``.

        Args:
            root: Node whose children are listed first
            projection: Columns the caller wants in every row
            recursive: Expand directories below the first level

        Yields:
            DirectoryRow for every node discovered

        Raises:
            ListingUnavailableError: When a directory can't be listed
        """
        pass

    def _check_capabilities(self, columns: Sequence[DocumentColumn]) -> None:
        missing = [c for c in columns if c not in self.adapter.supported_columns()]
        if missing:
            names = ", ".join(c.name for c in missing)
            raise CapabilityMismatchError(
                f"{self.adapter.__class__.__name__} cannot provide columns: {names}"
            )


class BreadthFirstRowTraverser(RowTraverser):
    """Level-order traversal strategy.

    All children of a directory are emitted before anything from the next
    level. The first listing that cannot be read ends the whole walk.
    """

    def __init__(self,
                 adapter: CursorAdapter,
                 cancel_check: Optional[Callable[[], bool]] = None):
        """Initialize traverser.

        Args:
            adapter: CursorAdapter for listing directories
            cancel_check: Called before each directory is expanded; a true
                result stops the walk with TraversalCancelledError
        """
        super().__init__(adapter)
        self.cancel_check = cancel_check
        self.listings_opened = 0

    def traverse(self,
                 root: NodeIdentity,
                 projection: ColumnProjection,
                 recursive: bool = True) -> Iterator[DirectoryRow]:
        """Traverse tree breadth-first.

        Root-only mode lists ``root`` once and never queues anything else.
        """
        columns = projection.effective(recursive)
        self._check_capabilities(columns)
        keys = [column.key for column in columns]
        logger.debug("Traversing %s (recursive=%s) with columns %s", root, recursive, keys)

        queue = TraversalQueue()
        queue.push(root, root.reference.children_handle())

        while queue:
            if self.cancel_check is not None and self.cancel_check():
                raise TraversalCancelledError(f"Traversal of {root} cancelled")

            parent, handle = queue.pop()
            logger.debug("Expanding %s (%d pending)", handle, len(queue))

            with closing(self._list(root, parent, handle, columns, projection, keys)) as rows:
                for row in rows:
                    yield row

                    if recursive and row.is_directory:
                        document_id = row.reference.document_id
                        queue.push(row.node, root.reference.child(document_id).children_handle())

    def _list(self,
              root: NodeIdentity,
              parent: NodeIdentity,
              handle: ChildListingHandle,
              columns: Sequence[DocumentColumn],
              projection: ColumnProjection,
              keys: Sequence[str]) -> Iterator[DirectoryRow]:
        try:
            rows = self.adapter.list_children(handle, keys)
        except OSError as e:
            raise ListingUnavailableError(handle, parent, str(e)) from e

        if rows is None:
            logger.warning("Listing unavailable for %s", handle)
            raise ListingUnavailableError(handle, parent)

        self.listings_opened += 1
        cursor = iter(rows)
        try:
            while True:
                try:
                    raw = next(cursor)
                except StopIteration:
                    break
                except OSError as e:
                    raise ListingUnavailableError(handle, parent, str(e)) from e

                row = self._build_row(root, parent, raw, columns, projection)
                if row is not None:
                    yield row
        finally:
            close = getattr(rows, "close", None)
            if close is not None:
                close()

    def _build_row(self,
                   root: NodeIdentity,
                   parent: NodeIdentity,
                   raw: RawRow,
                   columns: Sequence[DocumentColumn],
                   projection: ColumnProjection) -> Optional[DirectoryRow]:
        values = {}
        for column in columns:
            cell = raw.get(column.key)
            if cell is None:
                continue
            try:
                values[column] = column.coerce(cell)
            except (TypeError, ValueError) as e:
                logger.warning("Failed to read column %s under %s: %s", column.key, parent, e)

        document_id = values.get(DocumentColumn.DOCUMENT_ID)
        if not document_id:
            logger.warning("Skipping row without document id under %s", parent)
            return None

        mime_type = values.get(DocumentColumn.MIME_TYPE)
        is_directory = None if mime_type is None else mime_type == DIRECTORY_MIME_TYPE

        # The reference takes its authority and tree from the root; the parent
        # only names the logical directory.
        node = NodeIdentity(
            root=root.root,
            reference=root.reference.child(document_id),
            parent=parent.reference,
            is_tree_root=False,
        )
        data = {c.display_name: values[c] for c in projection if c in values}
        return DirectoryRow(node=node, data=data, is_directory=is_directory,
                            mime_type=mime_type)
