"""
Tests for the functional API: listings, reference search, statistics and
single-file caching.
"""

import pytest

from docmirror import (
    CopyPrimitive,
    DocumentReference,
    cache_single_file,
    cached_file_paths,
    clear_cached_files,
    find_file_references,
    get_tree_stats,
    list_files,
    reconcile_mirror,
)
from docmirror.adapters import InMemoryDocumentProvider


TREE = {
    "a.txt": b"a",
    "song.mp3": b"m",
    "sub": {"b.jpg": b"b", "inner": {"c.jpg": b"c"}},
}


@pytest.fixture
def provider():
    return InMemoryDocumentProvider.from_dict(TREE)


class TestListFiles:

    def test_immediate_children_only(self, provider):
        rows = list(list_files(provider.root_node(), provider, ["displayName", "mimeType"]))

        assert [row["data"]["displayName"] for row in rows] == ["a.txt", "song.mp3", "sub"]
        assert rows[0]["data"] == {"displayName": "a.txt", "mimeType": "text/plain"}

    def test_metadata(self, provider):
        root = provider.root_node()
        rows = list(list_files(root, provider, ["displayName", "mimeType"]))

        sub = rows[2]["metadata"]
        assert sub["isDirectory"] is True
        assert sub["parentUri"] == str(root.reference)
        assert sub["rootUri"] == str(root.reference)
        assert DocumentReference.parse(sub["uri"]).document_id == "primary:root/sub"

    def test_default_columns(self, provider):
        rows = list(list_files(provider.root_node(), provider))
        assert set(rows[0]["data"]) == {"id", "mimeType", "lastModified"}

    def test_lists_a_subdirectory(self, provider):
        from docmirror import NodeIdentity

        root = provider.root_node()
        sub = NodeIdentity(root=root.root,
                           reference=root.reference.child("primary:root/sub"),
                           parent=root.reference)
        rows = list(list_files(sub, provider, ["displayName"]))

        assert [row["data"]["displayName"] for row in rows] == ["b.jpg", "inner"]


class TestFindFileReferences:

    def test_images(self, provider):
        refs = find_file_references(provider.root_node(), provider, "image")

        assert [DocumentReference.parse(r).name for r in refs] == ["b.jpg", "c.jpg"]

    def test_any(self, provider):
        refs = find_file_references(provider.root_node(), provider)
        assert len(refs) == 4


def test_tree_stats(provider):
    provider.add_file("primary:root", "mystery", b"", mime_type=None)

    stats = get_tree_stats(provider.root_node(), provider)

    assert stats == {'total': 7, 'files': 4, 'directories': 2, 'unknown': 1}


class TestCacheSingleFile:

    def test_copies_under_inferred_name(self, provider, tmp_path):
        ref = provider.root_node().reference.child("primary:root/sub/b.jpg")

        path = cache_single_file(str(ref), tmp_path / "single", provider)

        assert path == tmp_path / "single" / "b.jpg"
        assert path.read_bytes() == b"b"

    def test_no_name_for_treeless_reference(self, provider, tmp_path):
        ref = DocumentReference(provider.authority, None, "primary:root/a.txt")
        assert cache_single_file(ref, tmp_path, provider) is None

    def test_copy_failure(self, provider, tmp_path):
        provider.fail_copy("primary:root/a.txt")
        ref = provider.root_node().reference.child("primary:root/a.txt")
        assert cache_single_file(ref, tmp_path, provider) is None

    def test_unexpected_copier_error(self, provider, tmp_path):
        class CorruptingCopier(CopyPrimitive):
            def copy(self, reference, target_dir, target_filename):
                raise ValueError("bad bytes")

        ref = provider.root_node().reference.child("primary:root/a.txt")
        assert cache_single_file(ref, tmp_path, CorruptingCopier()) is None

    def test_missing_document(self, provider, tmp_path):
        ref = provider.root_node().reference.child("primary:root/gone.txt")
        assert cache_single_file(ref, tmp_path, provider) is None


def test_cache_housekeeping(provider, tmp_path):
    cache = tmp_path / "cache"
    reconcile_mirror(provider.root_node(), cache, provider)

    assert [p.name for p in cached_file_paths(cache)[1:]] == [
        "a.txt", "b.jpg", "c.jpg", "song.mp3",
    ]
    assert clear_cached_files(cache)
    assert cached_file_paths(cache) == []
