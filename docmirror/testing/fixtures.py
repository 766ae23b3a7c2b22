"""Test fixtures for docmirror consumers.

These helpers wrap providers to observe or disturb them, and build trees on
disk, so test suites can exercise traversal and reconciliation without a
real remote store.
"""

from pathlib import Path
from typing import Iterator, List, Mapping, Optional, Sequence, Set, Tuple, Union

from ..core.adapter import CopyPrimitive, CursorAdapter, RawRow
from ..core.node import ChildListingHandle, DocumentReference


def make_local_tree(base_dir: Union[str, Path], tree: Mapping) -> Path:
    """Create files and directories on disk from nested dicts.

    Mapping values become directories, bytes or str values become files.

    Example:
        make_local_tree(tmp_path / "remote", {"a.txt": "a", "sub": {"b.jpg": b"b"}})
    """
    base_dir = Path(base_dir)
    base_dir.mkdir(parents=True, exist_ok=True)
    for name, value in tree.items():
        path = base_dir / name
        if isinstance(value, Mapping):
            make_local_tree(path, value)
        elif isinstance(value, str):
            path.write_text(value)
        else:
            path.write_bytes(value)
    return base_dir


class RecordingCopier(CopyPrimitive):
    """Copy primitive that records every call before delegating.

    Attributes:
        calls: (reference, target_dir, target_filename) per copy request
    """

    def __init__(self, base: CopyPrimitive):
        self.base = base
        self.calls: List[Tuple[DocumentReference, Path, str]] = []

    def copy(self,
             reference: DocumentReference,
             target_dir: Path,
             target_filename: str) -> Optional[Path]:
        self.calls.append((reference, Path(target_dir), target_filename))
        return self.base.copy(reference, target_dir, target_filename)


class BrokenCursorAdapter(CursorAdapter):
    """Adapter whose listings break partway through.

    Listing one of ``broken`` handles raises OSError after
    ``fail_after`` rows have been read; other listings pass through.
    """

    def __init__(self,
                 base: CursorAdapter,
                 broken: Set[str],
                 fail_after: int = 0):
        """Wrap an adapter.

        Args:
            base: Adapter serving the real rows
            broken: Parent document ids whose listings fail
            fail_after: Rows delivered before the failure
        """
        self.base = base
        self.broken = set(broken)
        self.fail_after = fail_after

    def list_children(self,
                      handle: ChildListingHandle,
                      columns: Sequence[str]) -> Optional[Iterator[RawRow]]:
        rows = self.base.list_children(handle, columns)
        if rows is None or handle.parent_document_id not in self.broken:
            return rows
        return self._break(rows, handle)

    def _break(self, rows: Iterator[RawRow], handle: ChildListingHandle) -> Iterator[RawRow]:
        for index, row in enumerate(rows):
            if index >= self.fail_after:
                break
            yield row
        raise OSError(f"Connection lost while listing {handle}")

    def supported_columns(self):
        return self.base.supported_columns()
