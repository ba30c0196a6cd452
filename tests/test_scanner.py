"""
Tests for tree enumeration and normalization.

Tests:
  - exclusion filters: extension suffix match, directory substring match
  - trash folders and unreadable sub-directories are skipped, siblings kept
  - normalization: ordinal sort, root stripping, separator conversion
  - modification times are read exactly once per file
"""
import os
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path


class FakeFileSystem:
    """
    In-memory tree keyed by directory path:
      {dir_path: ([sub-directory paths], [file paths])}
    """

    def __init__(self, tree, sep="/", unreadable=(), unstattable=()):
        self.tree = tree
        self.sep = sep
        self.unreadable = set(unreadable)
        self.unstattable = set(unstattable)
        self.listed = []
        self.stat_calls = []

    def list_dir(self, path):
        self.listed.append(path)
        if path in self.unreadable:
            raise PermissionError(f"denied: {path}")
        return self.tree.get(path, ([], []))

    def get_mtime(self, path):
        self.stat_calls.append(path)
        if path in self.unstattable:
            raise PermissionError(f"denied: {path}")
        return datetime(2024, 1, 1, tzinfo=timezone.utc)


def _paths(entries):
    return sorted((e.kind.value, e.path) for e in entries)


# ── Tests: enumerate_tree ─────────────────────────────────────────────────────

class TestEnumerateTree(unittest.TestCase):

    def test_lists_every_file_and_directory(self):
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({
            "/r/": (["/r/a"], ["/r/top.txt"]),
            "/r/a": (["/r/a/b"], ["/r/a/one.txt"]),
            "/r/a/b": ([], ["/r/a/b/two.txt"]),
        })
        entries = enumerate_tree(fs, "/r/")
        self.assertEqual(_paths(entries), [
            ("dir", "/r/a"), ("dir", "/r/a/b"),
            ("file", "/r/a/b/two.txt"), ("file", "/r/a/one.txt"), ("file", "/r/top.txt"),
        ])

    def test_directory_emitted_before_its_children(self):
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({
            "/r/": (["/r/a"], []),
            "/r/a": ([], ["/r/a/f"]),
        })
        entries = enumerate_tree(fs, "/r/")
        self.assertEqual([e.path for e in entries], ["/r/a", "/r/a/f"])

    def test_excluded_extension_is_anchored_at_end(self):
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({
            "/r/": ([], ["/r/a.tmp", "/r/a.tmp.txt", "/r/notatmp", "/r/b.txt"]),
        })
        entries = enumerate_tree(fs, "/r/", exclude_exts=["tmp"])
        self.assertEqual(sorted(e.path for e in entries),
                         ["/r/a.tmp.txt", "/r/b.txt", "/r/notatmp"])

    def test_excluded_directory_is_a_substring_match(self):
        """'cache' also excludes 'webcache_old' and its whole subtree."""
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({
            "/r/": (["/r/cache", "/r/webcache_old", "/r/src"], []),
            "/r/webcache_old": ([], ["/r/webcache_old/f"]),
            "/r/src": ([], ["/r/src/main.py"]),
        })
        entries = enumerate_tree(fs, "/r/", exclude_dirs=["cache"])
        self.assertEqual(_paths(entries), [("dir", "/r/src"), ("file", "/r/src/main.py")])
        self.assertNotIn("/r/webcache_old", fs.listed)

    def test_trash_folder_contents_are_skipped(self):
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({
            "/r/": (["/r/$RECYCLE.BIN", "/r/docs"], []),
            "/r/$RECYCLE.BIN": ([], ["/r/$RECYCLE.BIN/junk"]),
            "/r/docs": ([], ["/r/docs/a.txt"]),
        })
        entries = enumerate_tree(fs, "/r/")
        paths = [e.path for e in entries]
        self.assertNotIn("/r/$RECYCLE.BIN/junk", paths)
        self.assertIn("/r/docs/a.txt", paths)
        self.assertNotIn("/r/$RECYCLE.BIN", fs.listed)

    def test_trash_root_returns_none(self):
        from treesync.operations.scanner import enumerate_tree, normalize_entries
        fs = FakeFileSystem({})
        self.assertIsNone(enumerate_tree(fs, "/mnt/$RECYCLE.BIN/"))
        self.assertEqual(normalize_entries(fs, "/mnt/$RECYCLE.BIN/", None), [])

    def test_trash_marker_is_case_sensitive(self):
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({
            "/r/": (["/r/$recycle"], []),
            "/r/$recycle": ([], ["/r/$recycle/f"]),
        })
        paths = [e.path for e in enumerate_tree(fs, "/r/")]
        self.assertIn("/r/$recycle/f", paths)

    def test_unreadable_subtree_dropped_siblings_kept(self):
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({
            "/r/": (["/r/locked", "/r/open"], []),
            "/r/locked": ([], ["/r/locked/secret"]),
            "/r/open": ([], ["/r/open/f"]),
        }, unreadable={"/r/locked"})
        entries = enumerate_tree(fs, "/r/")
        self.assertEqual(_paths(entries), [
            ("dir", "/r/locked"), ("dir", "/r/open"), ("file", "/r/open/f"),
        ])

    def test_unreadable_root_propagates(self):
        from treesync.operations.scanner import enumerate_tree
        fs = FakeFileSystem({}, unreadable={"/r/"})
        with self.assertRaises(PermissionError):
            enumerate_tree(fs, "/r/")


# ── Tests: normalize_entries ──────────────────────────────────────────────────

class TestNormalizeEntries(unittest.TestCase):

    def _entries(self, *items):
        from treesync.models import EntryKind, PathEntry
        return [PathEntry(EntryKind.DIRECTORY if kind == "d" else EntryKind.FILE, path)
                for kind, path in items]

    def test_sorted_ordinally_and_relative(self):
        from treesync.operations.scanner import normalize_entries
        fs = FakeFileSystem({})
        raw = self._entries(("f", "/r/b.txt"), ("d", "/r/a/c"), ("f", "/r/B.txt"),
                            ("d", "/r/a b"), ("d", "/r/a"), ("f", "/r/a/x.txt"))
        result = normalize_entries(fs, "/r/", raw)
        self.assertEqual([e.path for e in result],
                         ["a", "a b", "a/c", "B.txt", "a/x.txt", "b.txt"])
        self.assertEqual([e.is_dir for e in result], [True, True, True, False, False, False])

    def test_native_separator_becomes_slash(self):
        from treesync.operations.scanner import normalize_entries
        fs = FakeFileSystem({}, sep="\\")
        raw = self._entries(("d", "C:\\r\\a"), ("f", "C:\\r\\a\\x.txt"))
        result = normalize_entries(fs, "C:\\r\\", raw)
        self.assertEqual([e.path for e in result], ["a", "a/x.txt"])

    def test_mtime_read_once_per_file_only(self):
        from treesync.operations.scanner import normalize_entries
        fs = FakeFileSystem({})
        raw = self._entries(("d", "/r/a"), ("f", "/r/a/x"), ("f", "/r/y"))
        result = normalize_entries(fs, "/r/", raw)
        self.assertEqual(sorted(fs.stat_calls), ["/r/a/x", "/r/y"])
        self.assertIsNone(result[0].modified_at)
        self.assertEqual(result[1].modified_at, datetime(2024, 1, 1, tzinfo=timezone.utc))

    def test_failed_mtime_read_leaves_none(self):
        from treesync.operations.scanner import normalize_entries
        fs = FakeFileSystem({}, unstattable={"/r/x"})
        result = normalize_entries(fs, "/r/", self._entries(("f", "/r/x"), ("f", "/r/y")))
        self.assertIsNone(result[0].modified_at)
        self.assertIsNotNone(result[1].modified_at)


# ── Tests: local filesystem scan ──────────────────────────────────────────────

class TestLocalScan(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name) / "tree"
        (self.root / "sub" / "deeper").mkdir(parents=True)
        (self.root / "sub" / "deeper" / "f.txt").write_text("x", encoding="utf-8")
        (self.root / "g.log").write_text("y", encoding="utf-8")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_scan_local_tree(self):
        from treesync.operations.filesystem import LocalFileSystem
        from treesync.operations.scanner import enumerate_tree, normalize_entries
        fs = LocalFileSystem()
        root = str(self.root) + os.sep
        result = normalize_entries(fs, root, enumerate_tree(fs, root, exclude_exts=["log"]))
        self.assertEqual([e.path for e in result], ["sub", "sub/deeper", "sub/deeper/f.txt"])
        self.assertEqual(result[2].modified_at.tzinfo, timezone.utc)


if __name__ == "__main__":
    unittest.main()
