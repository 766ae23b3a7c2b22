"""Document providers for specific backing stores.

Providers implement the CursorAdapter and CopyPrimitive interfaces so the
traversal engine and the reconciler can work against them.
"""

from .filesystem import LocalDocumentProvider
from .memory import InMemoryDocumentProvider

__all__ = [
    "InMemoryDocumentProvider",
    "LocalDocumentProvider",
]
