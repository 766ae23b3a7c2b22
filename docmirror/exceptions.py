"""Exception hierarchy for docmirror.

Only listing failures are fatal to a traversal. Per-file problems during
reconciliation (unreadable names, failed copies, failed deletes) are routed
through an ErrorPolicy instead of being raised here.
"""

from typing import Any, Optional


class DocMirrorError(Exception):
    """Base class for all docmirror errors."""
    pass


class ListingUnavailableError(DocMirrorError):
    """Raised when the children of a directory cannot be listed.

    This aborts the whole traversal. Rows emitted before the failure are
    not rolled back.

    Attributes:
        handle: The child-listing handle that could not be read
        parent: NodeIdentity of the directory being expanded, if known
    """

    def __init__(self, handle: Any, parent: Optional[Any] = None,
                 reason: Optional[str] = None):
        self.handle = handle
        self.parent = parent
        self.reason = reason
        message = f"Cannot list children of {handle}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TraversalCancelledError(DocMirrorError):
    """Raised when a cooperative cancellation check stops a traversal."""
    pass


class CapabilityMismatchError(DocMirrorError):
    """Raised when a requested projection can't be served by an adapter."""
    pass


class CopyFailedError(DocMirrorError):
    """Raised for a copy primitive that reported failure without raising."""

    def __init__(self, reference: Any, target: Any):
        self.reference = reference
        self.target = target
        super().__init__(f"Could not copy {reference} to {target}")


class InvalidReferenceError(DocMirrorError, ValueError):
    """Raised when a string cannot be parsed as a document reference."""
    pass
