"""
Tests for the local filesystem document provider.
"""

import os
import sys
import tempfile
import shutil
import unittest
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from docmirror import (
    ChildListingHandle,
    ListingUnavailableError,
    get_tree_stats,
    iter_rows,
    reconcile_mirror,
)
from docmirror.adapters import LocalDocumentProvider
from docmirror.testing import make_local_tree


class TestLocalDocumentProvider(unittest.TestCase):
    """Listing and copying through a real directory."""

    def setUp(self):
        """Create test directory structure.

        remote/
        ├── a.txt
        ├── .hidden
        └── sub/
            ├── b.jpg
            └── deeper/
                └── c.mp3
        """
        self.temp_dir = Path(tempfile.mkdtemp())
        self.remote = make_local_tree(self.temp_dir / "remote", {
            "a.txt": "alpha",
            ".hidden": "h",
            "sub": {"b.jpg": b"\xff\xd8", "deeper": {"c.mp3": b"ID3"}},
        })
        self.provider = LocalDocumentProvider(self.remote)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_document_ids(self):
        self.assertEqual(self.provider.document_id(self.remote), "local:remote")
        self.assertEqual(self.provider.document_id(self.remote / "sub" / "b.jpg"),
                         "local:remote/sub/b.jpg")
        self.assertEqual(self.provider.path_for("local:remote/sub"), self.remote / "sub")

    def test_path_for_rejects_foreign_ids(self):
        self.assertIsNone(self.provider.path_for("other:remote/a.txt"))
        self.assertIsNone(self.provider.path_for("local:remote/../escape"))

    def test_walk(self):
        rows = list(iter_rows(self.provider.root_node(), self.provider,
                              columns=["displayName", "size"]))
        names = [row.name for row in rows]

        self.assertEqual(names, [".hidden", "a.txt", "sub", "b.jpg", "deeper", "c.mp3"])
        by_name = {row.name: row for row in rows}
        self.assertEqual(by_name["a.txt"].data, {"displayName": "a.txt", "size": 5})
        self.assertTrue(by_name["deeper"].is_directory)
        self.assertEqual(by_name["c.mp3"].mime_type, "audio/mpeg")

    def test_exclude_hidden(self):
        provider = LocalDocumentProvider(self.remote, include_hidden=False)
        names = [row.name for row in iter_rows(provider.root_node(), provider, recursive=False)]
        self.assertEqual(names, ["a.txt", "sub"])

    def test_stats(self):
        stats = get_tree_stats(self.provider.root_node(), self.provider)
        self.assertEqual(stats, {'total': 6, 'files': 4, 'directories': 2, 'unknown': 0})

    def test_subtree_root(self):
        root = self.provider.root_node(self.remote / "sub")
        names = [row.name for row in iter_rows(root, self.provider)]
        self.assertEqual(names, ["b.jpg", "deeper", "c.mp3"])

    def test_missing_directory_is_unavailable(self):
        handle = ChildListingHandle(self.provider.authority, "local:remote", "local:remote/nope")
        self.assertIsNone(self.provider.list_children(handle, ["document_id"]))

    def test_file_is_not_listable(self):
        handle = ChildListingHandle(self.provider.authority, "local:remote", "local:remote/a.txt")
        self.assertIsNone(self.provider.list_children(handle, ["document_id"]))

    def test_directory_removed_during_walk(self):
        rows = iter_rows(self.provider.root_node(), self.provider)
        seen = [next(rows).name for _ in range(3)]
        self.assertEqual(seen, [".hidden", "a.txt", "sub"])
        shutil.rmtree(self.remote / "sub")

        with self.assertRaises(ListingUnavailableError):
            list(rows)

    def test_mirror(self):
        cache = self.temp_dir / "cache"
        copied = reconcile_mirror(self.provider.root_node(), cache, self.provider)

        self.assertEqual(len(copied), 4)
        self.assertEqual(sorted(os.listdir(cache)), [".hidden", "a.txt", "b.jpg", "c.mp3"])
        self.assertEqual((cache / "a.txt").read_text(), "alpha")
        self.assertEqual((cache / "c.mp3").read_bytes(), b"ID3")

    @unittest.skipIf(not hasattr(os, "symlink"), "symlinks not supported")
    def test_symlinks_skipped_by_default(self):
        try:
            os.symlink(self.remote / "a.txt", self.remote / "link.txt")
        except OSError:
            self.skipTest("cannot create symlinks here")

        names = [row.name for row in iter_rows(self.provider.root_node(), self.provider,
                                               recursive=False)]
        self.assertNotIn("link.txt", names)

        following = LocalDocumentProvider(self.remote, follow_symlinks=True)
        names = [row.name for row in iter_rows(following.root_node(), following,
                                               recursive=False)]
        self.assertIn("link.txt", names)


if __name__ == "__main__":
    unittest.main()
