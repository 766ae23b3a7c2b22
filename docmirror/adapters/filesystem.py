"""Local filesystem document provider.

Serves a local directory as a document tree. Useful for mirroring from a
mounted share or removable volume, and for exercising the engine against
real directories.
"""

import logging
import mimetypes
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Sequence, Union

from ..core.adapter import CopyPrimitive, CursorAdapter, RawRow
from ..core.node import DIRECTORY_MIME_TYPE, ChildListingHandle, DocumentReference, NodeIdentity
from ..core.projection import DocumentColumn


logger = logging.getLogger(__name__)

DEFAULT_AUTHORITY = "docmirror.localstorage"
DEFAULT_MIME_TYPE = "application/octet-stream"


class LocalDocumentProvider(CursorAdapter, CopyPrimitive):
    """Adapter exposing a local directory as a remote-style document tree.

    Document ids are ``<volume>:<base name>/<path relative to base_dir>``,
    so the base directory itself is ``<volume>:<base name>`` and the last
    segment of every id is the entry's own name.
    """

    def __init__(self,
                 base_dir: Union[str, Path],
                 volume: str = "local",
                 authority: str = DEFAULT_AUTHORITY,
                 follow_symlinks: bool = False,
                 include_hidden: bool = True):
        """Initialize filesystem provider.

        Args:
            base_dir: Directory served as the volume root
            volume: Volume name used as document id prefix
            authority: Authority used in issued references
            follow_symlinks: Whether to list symbolic links
            include_hidden: Whether to include hidden files/directories
        """
        self.base_dir = Path(base_dir).absolute()
        self.volume = volume
        self.authority = authority
        self.follow_symlinks = follow_symlinks
        self.include_hidden = include_hidden

    @property
    def _prefix(self) -> str:
        return f"{self.volume}:{self.base_dir.name}"

    def document_id(self, path: Union[str, Path]) -> str:
        """Document id of a path inside ``base_dir``."""
        relative = Path(path).absolute().relative_to(self.base_dir).as_posix()
        return self._prefix if relative == "." else f"{self._prefix}/{relative}"

    def path_for(self, document_id: str) -> Optional[Path]:
        """Local path of a document id, or None if it isn't ours."""
        if document_id == self._prefix:
            return self.base_dir
        if not document_id.startswith(self._prefix + "/"):
            return None
        relative = document_id[len(self._prefix) + 1:]
        if ".." in Path(relative).parts:
            return None
        return self.base_dir / relative

    def root_node(self, path: Union[str, Path, None] = None) -> NodeIdentity:
        """Identity of a tree granted at ``path`` (default: ``base_dir``)."""
        tree_id = self.document_id(path if path is not None else self.base_dir)
        return NodeIdentity.for_tree_root(DocumentReference.tree(self.authority, tree_id))

    # CursorAdapter

    def list_children(self,
                      handle: ChildListingHandle,
                      columns: Sequence[str]) -> Optional[Iterator[RawRow]]:
        if handle.authority != self.authority:
            return None
        directory = self.path_for(handle.parent_document_id)
        if directory is None:
            return None
        try:
            names = sorted(os.listdir(directory))
        except (PermissionError, FileNotFoundError, NotADirectoryError) as e:
            logger.debug("Cannot list %s: %s", directory, e)
            return None
        return self._rows(directory, names, tuple(columns))

    def _rows(self, directory: Path, names, columns) -> Iterator[RawRow]:
        for name in names:
            if not self.include_hidden and name.startswith('.'):
                continue
            path = directory / name
            if not self.follow_symlinks and path.is_symlink():
                continue
            try:
                st = path.stat()
            except OSError:
                # Vanished or dangling; report what we know.
                st = None
            yield self._row(path, st, columns)

    def _row(self, path: Path, st: Optional[os.stat_result], columns) -> Dict[str, Any]:
        cells: Dict[str, Any] = {
            DocumentColumn.DOCUMENT_ID.key: self.document_id(path),
            DocumentColumn.DISPLAY_NAME.key: path.name,
        }
        if st is not None:
            is_dir = path.is_dir()
            cells[DocumentColumn.MIME_TYPE.key] = (
                DIRECTORY_MIME_TYPE if is_dir
                else mimetypes.guess_type(path.name)[0] or DEFAULT_MIME_TYPE
            )
            cells[DocumentColumn.LAST_MODIFIED.key] = int(st.st_mtime * 1000)
            if not is_dir:
                cells[DocumentColumn.SIZE.key] = st.st_size
        return {key: cells[key] for key in columns if key in cells}

    # CopyPrimitive

    def copy(self,
             reference: DocumentReference,
             target_dir: Path,
             target_filename: str) -> Optional[Path]:
        source = self.path_for(reference.document_id)
        if source is None or not source.is_file():
            return None
        target_dir = Path(target_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / target_filename
        shutil.copyfile(source, target)
        return target
