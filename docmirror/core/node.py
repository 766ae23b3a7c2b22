"""Node identity types for docmirror.

References into the remote tree are opaque to the traversal engine; it only
needs to build child references and child-listing handles from them. The
concrete shape used here follows the content-provider convention of
``content://<authority>/tree/<tree id>/document/<document id>`` so that
references stay printable and parseable, but nothing in the engine depends
on that format beyond the helpers in this module.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import quote, unquote, urlsplit

from ..exceptions import InvalidReferenceError


SCHEME = "content"
DIRECTORY_MIME_TYPE = "vnd.android.document/directory"


def _encode(value: str) -> str:
    return quote(value, safe="")


@dataclass(frozen=True)
class ChildListingHandle:
    """Handle used to ask a CursorAdapter for the children of a directory.

    Handles are always derived from the tree root's authority and tree id,
    never from the immediate parent's reference.
    """
    authority: str
    tree_id: str
    parent_document_id: str

    def __str__(self) -> str:
        return (f"{SCHEME}://{self.authority}/tree/{_encode(self.tree_id)}"
                f"/document/{_encode(self.parent_document_id)}/children")


@dataclass(frozen=True)
class DocumentReference:
    """Stable reference to one document in the remote tree.

    Attributes:
        authority: Provider authority that owns the tree
        tree_id: Document id of the granted tree root, or None for a
            reference obtained outside any tree grant
        document_id: Document id of the referenced node
    """
    authority: str
    tree_id: Optional[str]
    document_id: str

    @classmethod
    def tree(cls, authority: str, tree_id: str) -> 'DocumentReference':
        """Build the reference of a granted tree root."""
        return cls(authority, tree_id, tree_id)

    @classmethod
    def parse(cls, value: str) -> 'DocumentReference':
        """Parse a rendered reference.

        Accepts ``content://a/tree/<t>``, ``content://a/tree/<t>/document/<d>``
        and the tree-less ``content://a/document/<d>``.

        Raises:
            InvalidReferenceError: If the string has another shape
        """
        parts = urlsplit(value)
        if parts.scheme != SCHEME or not parts.netloc:
            raise InvalidReferenceError(f"Not a document reference: {value!r}")

        segments = [unquote(s) for s in parts.path.split("/")[1:]]
        if len(segments) == 2 and segments[0] == "tree":
            return cls.tree(parts.netloc, segments[1])
        if len(segments) == 4 and segments[0] == "tree" and segments[2] == "document":
            return cls(parts.netloc, segments[1], segments[3])
        if len(segments) == 2 and segments[0] == "document":
            return cls(parts.netloc, None, segments[1])
        raise InvalidReferenceError(f"Not a document reference: {value!r}")

    @property
    def is_tree_reference(self) -> bool:
        return self.tree_id is not None

    @property
    def path(self) -> str:
        """Decoded path-like representation of this reference."""
        if self.tree_id is None:
            return f"/document/{self.document_id}"
        return f"/tree/{self.tree_id}/document/{self.document_id}"

    @property
    def name(self) -> Optional[str]:
        """Filename inferred from the last segment of :attr:`path`.

        Returns None for references outside a tree grant and for paths
        whose last segment is empty.
        """
        if not self.is_tree_reference:
            return None
        name = self.path.rsplit("/", 1)[-1]
        return name or None

    def child(self, document_id: str) -> 'DocumentReference':
        """Reference to another document anchored to this reference's tree."""
        return DocumentReference(self.authority, self.tree_id, document_id)

    def children_handle(self) -> ChildListingHandle:
        """Handle listing the children of this document within its tree."""
        if self.tree_id is None:
            raise InvalidReferenceError(
                f"{self} is not anchored to a tree and cannot be listed"
            )
        return ChildListingHandle(self.authority, self.tree_id, self.document_id)

    def __str__(self) -> str:
        if self.tree_id is None:
            return f"{SCHEME}://{self.authority}/document/{_encode(self.document_id)}"
        return (f"{SCHEME}://{self.authority}/tree/{_encode(self.tree_id)}"
                f"/document/{_encode(self.document_id)}")


@dataclass(frozen=True)
class NodeIdentity:
    """Where a node sits in a traversal.

    Every non-root ``parent`` is a reference the engine produced during an
    earlier expansion step.
    """
    root: DocumentReference
    reference: DocumentReference
    parent: Optional[DocumentReference] = None
    is_tree_root: bool = False

    @classmethod
    def for_tree_root(cls, reference: DocumentReference) -> 'NodeIdentity':
        """Identity of a granted tree root."""
        return cls(root=reference, reference=reference, parent=None, is_tree_root=True)

    @classmethod
    def parse_root(cls, value: str) -> 'NodeIdentity':
        """Parse a rendered tree reference into a root identity."""
        return cls.for_tree_root(DocumentReference.parse(value))

    def __str__(self) -> str:
        return str(self.reference)


@dataclass
class DirectoryRow:
    """One row produced while listing a directory.

    Attributes:
        node: Identity of the listed node
        data: Caller-requested fields keyed by display name
        is_directory: True/False from the mime type, None when unknown
        mime_type: Mime type when the engine fetched it, requested or not
    """
    node: NodeIdentity
    data: Dict[str, Any] = field(default_factory=dict)
    is_directory: Optional[bool] = None
    mime_type: Optional[str] = None

    @property
    def reference(self) -> DocumentReference:
        return self.node.reference

    @property
    def name(self) -> Optional[str]:
        return self.node.reference.name

    def as_dict(self) -> Dict[str, Any]:
        """Encode the row as plain data for transport to a caller."""
        parent = self.node.parent
        return {
            "data": dict(self.data),
            "metadata": {
                "parentUri": str(parent) if parent is not None else None,
                "rootUri": str(self.node.root),
                "isDirectory": self.is_directory,
                "uri": str(self.node.reference),
            },
        }
