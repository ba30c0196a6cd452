"""
Tree scanning: enumerate a root, then sort and relativize the entries
"""
from typing import Optional
from .. import config as _cfg
from ..models import EntryKind, PathEntry
from ..utils.logging import vlog
from ..utils.ignore_patterns import is_excluded_dir, is_excluded_file


def enumerate_tree(fs, root: str,
                   exclude_dirs: Optional[list] = None,
                   exclude_exts: Optional[list] = None) -> Optional[list[PathEntry]]:
    """
    Recursively list every file and directory under *root* (unordered).

    Returns None for a trash directory ($RECYCLE…). A sub-directory that
    cannot be read still appears as an entry, but its subtree is dropped
    and its siblings are scanned as usual. Errors listing *root* itself
    propagate to the caller.

    Exclusions are meant for the source tree only; the destination is
    always scanned unfiltered so obsolete entries can be detected.
    """
    if _cfg.TRASH_MARKER in root:
        return None

    dirs, files = fs.list_dir(root)
    entries: list[PathEntry] = []

    for path in files:
        if is_excluded_file(path, exclude_exts):
            continue
        entries.append(PathEntry(EntryKind.FILE, path))

    for path in dirs:
        if is_excluded_dir(path, exclude_dirs):
            continue
        entries.append(PathEntry(EntryKind.DIRECTORY, path))
        try:
            subtree = enumerate_tree(fs, path, exclude_dirs, exclude_exts)
        except OSError as exc:
            vlog(f"  [SCAN-SKIP] {path}: {exc}")
            continue
        if subtree is None:
            vlog(f"  [SCAN-SKIP] {path}: trash folder")
            continue
        entries.extend(subtree)

    return entries


def normalize_entries(fs, root: str, entries: Optional[list[PathEntry]]) -> list[PathEntry]:
    """
    Sort *entries* (directories first, then ordinal path order) and strip
    *root* from each path, using '/' as the separator.

    File modification times are read here, once; the sync engine never
    stats a file again. A failed read leaves modified_at as None.
    """
    if not entries:
        return []

    def _canonical(path: str) -> str:
        return path.replace(fs.sep, "/")

    ordered = sorted(entries, key=lambda e: (not e.is_dir, _canonical(e.path)))

    result: list[PathEntry] = []
    for entry in ordered:
        rel = _canonical(entry.path[len(root):])
        modified_at = None
        if not entry.is_dir:
            try:
                modified_at = fs.get_mtime(entry.path)
            except OSError as exc:
                vlog(f"  [STAT-FAIL] {rel}: {exc}")
        result.append(PathEntry(entry.kind, rel, modified_at))
    return result
