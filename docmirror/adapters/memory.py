"""In-memory document provider.

Serves a tree held in dictionaries through the same paged-listing contract
a real remote provider would, and doubles as its own copy primitive. It is
what the test suite and the examples run against, and it can simulate the
failure modes the engine has to cope with: revoked directories, files that
refuse to copy, and providers that don't report mime types.
"""

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple, Union

from ..core.adapter import CopyPrimitive, CursorAdapter, RawRow
from ..core.node import DIRECTORY_MIME_TYPE, ChildListingHandle, DocumentReference, NodeIdentity
from ..core.projection import DocumentColumn


DEFAULT_AUTHORITY = "docmirror.memory"
DEFAULT_MIME_TYPE = "application/octet-stream"

_GUESS = object()

TreeSpec = Mapping[str, Union[bytes, str, Mapping]]


@dataclass
class _Document:
    document_id: str
    display_name: str
    mime_type: Optional[str]
    content: bytes = b""
    last_modified: int = 0
    children: Optional[List[str]] = None

    @property
    def is_directory(self) -> bool:
        return self.children is not None


class InMemoryDocumentProvider(CursorAdapter, CopyPrimitive):
    """Dictionary-backed document tree with paged listings.

    Document ids are path-like (``<tree id>/<name>/<name>``) so filenames
    can be inferred from references the same way as for a real provider.

    Attributes:
        queries: Every (handle, columns) pair passed to list_children
        pages_fetched: Number of listing pages served so far
    """

    def __init__(self, authority: str = DEFAULT_AUTHORITY, page_size: int = 50):
        """Initialize an empty provider.

        Args:
            authority: Authority used in the references this provider issues
            page_size: Rows per listing page
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.authority = authority
        self.page_size = page_size
        self._documents: Dict[str, _Document] = {}
        self._revoked: Set[str] = set()
        self._failing_copies: Set[str] = set()
        self.queries: List[Tuple[ChildListingHandle, Tuple[str, ...]]] = []
        self.pages_fetched = 0

    @classmethod
    def from_dict(cls, tree: TreeSpec, tree_id: str = "primary:root",
                  **kwargs) -> 'InMemoryDocumentProvider':
        """Build a provider from nested dicts.

        Mapping values become directories; bytes or str values become
        files with that content.

        Example:
            >>> provider = InMemoryDocumentProvider.from_dict(
            ...     {"a.txt": b"a", "sub": {"b.jpg": b"b"}})
            >>> root = provider.root_node()
        """
        provider = cls(**kwargs)
        provider.add_root(tree_id)
        provider._add_tree(tree_id, tree)
        return provider

    def _add_tree(self, parent_id: str, tree: TreeSpec) -> None:
        for name, value in tree.items():
            if isinstance(value, Mapping):
                child_id = self.add_directory(parent_id, name)
                self._add_tree(child_id, value)
            else:
                content = value.encode() if isinstance(value, str) else value
                self.add_file(parent_id, name, content)

    # Building the tree

    def add_root(self, tree_id: str) -> DocumentReference:
        """Create a tree root and return its reference."""
        self._documents[tree_id] = _Document(
            tree_id, tree_id.rsplit(":", 1)[-1], DIRECTORY_MIME_TYPE, children=[]
        )
        return DocumentReference.tree(self.authority, tree_id)

    def add_directory(self, parent_id: str, name: str) -> str:
        """Create a directory and return its document id."""
        return self._add(parent_id, _Document(
            f"{parent_id}/{name}", name, DIRECTORY_MIME_TYPE, children=[]
        ))

    def add_file(self, parent_id: str, name: str, content: bytes = b"",
                 mime_type: Any = _GUESS, last_modified: int = 0) -> str:
        """Create a file and return its document id.

        Args:
            parent_id: Document id of the containing directory
            name: Display name
            content: File bytes
            mime_type: Mime type to report; guessed from the name by
                default, None to report no mime type at all
            last_modified: Modification time in milliseconds
        """
        if mime_type is _GUESS:
            mime_type = mimetypes.guess_type(name)[0] or DEFAULT_MIME_TYPE
        return self._add(parent_id, _Document(
            f"{parent_id}/{name}", name, mime_type, content, last_modified
        ))

    def _add(self, parent_id: str, document: _Document) -> str:
        parent = self._documents.get(parent_id)
        if parent is None or not parent.is_directory:
            raise KeyError(f"No directory with id {parent_id!r}")
        if document.document_id not in parent.children:
            parent.children.append(document.document_id)
        self._documents[document.document_id] = document
        return document.document_id

    def remove(self, document_id: str) -> None:
        """Delete a document and everything below it."""
        document = self._documents.pop(document_id)
        for child_id in document.children or ():
            self.remove(child_id)
        for candidate in self._documents.values():
            if candidate.children and document_id in candidate.children:
                candidate.children.remove(document_id)

    def root_node(self, tree_id: str = "primary:root") -> NodeIdentity:
        """Identity of a tree root, ready to pass to a traversal."""
        return NodeIdentity.for_tree_root(DocumentReference.tree(self.authority, tree_id))

    # Failure simulation

    def revoke(self, document_id: str) -> None:
        """Make the children of ``document_id`` unlistable."""
        self._revoked.add(document_id)

    def fail_copy(self, document_id: str) -> None:
        """Make copies of ``document_id`` raise PermissionError."""
        self._failing_copies.add(document_id)

    # CursorAdapter

    def list_children(self,
                      handle: ChildListingHandle,
                      columns: Sequence[str]) -> Optional[Iterator[RawRow]]:
        self.queries.append((handle, tuple(columns)))
        if handle.authority != self.authority or handle.tree_id not in self._documents:
            return None
        parent = self._documents.get(handle.parent_document_id)
        if parent is None or not parent.is_directory or parent.document_id in self._revoked:
            return None
        return self._pages(list(parent.children), tuple(columns))

    def _pages(self, child_ids: List[str], columns: Tuple[str, ...]) -> Iterator[RawRow]:
        for start in range(0, len(child_ids), self.page_size):
            self.pages_fetched += 1
            page = [self._row(self._documents[child_id], columns)
                    for child_id in child_ids[start:start + self.page_size]]
            yield from page

    def _row(self, document: _Document, columns: Tuple[str, ...]) -> Dict[str, Any]:
        cells = {
            DocumentColumn.DOCUMENT_ID.key: document.document_id,
            DocumentColumn.DISPLAY_NAME.key: document.display_name,
            DocumentColumn.MIME_TYPE.key: document.mime_type,
            DocumentColumn.LAST_MODIFIED.key: document.last_modified,
            DocumentColumn.SIZE.key: None if document.is_directory else len(document.content),
        }
        return {key: cells[key] for key in columns if cells.get(key) is not None}

    # CopyPrimitive

    def copy(self,
             reference: DocumentReference,
             target_dir: Path,
             target_filename: str) -> Optional[Path]:
        document = self._documents.get(reference.document_id)
        if document is None or document.is_directory:
            return None
        if document.document_id in self._failing_copies:
            raise PermissionError(f"Permission denied reading {reference}")

        target_dir = Path(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / target_filename
        target.write_bytes(document.content)
        return target
