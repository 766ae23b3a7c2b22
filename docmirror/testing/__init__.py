"""Testing utilities for docmirror consumers."""

from .fixtures import BrokenCursorAdapter, RecordingCopier, make_local_tree

__all__ = ["BrokenCursorAdapter", "RecordingCopier", "make_local_tree"]
