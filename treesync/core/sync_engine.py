"""
Main sync engine - three-phase merge-diff and orchestration
"""
from .. import config as _cfg
from ..models import PathEntry, split_entries
from ..utils.logging import log, vlog, warn
from ..utils.file_utils import is_outdated
from ..operations.scanner import enumerate_tree, normalize_entries
from ..operations.transfer import (
    COPY_NEW, COPY_UPDATED, DELETE_FILE,
    copy_new, copy_updated, delete_obsolete, record_failure,
)
from ..operations.directories import MAKE_DIR, REMOVE_DIR, create_directory, remove_directory


def new_report() -> dict:
    """
    {
      "actions":  [(action, rel), …],          # in the order they were taken
      "failures": [(action, rel, message), …],
    }
    """
    return dict(actions=[], failures=[])


# ── Phase 1: create missing directories ───────────────────────────────────────

def create_directories(source_dirs: list[PathEntry], dest_dirs: list[PathEntry],
                       dest_fs, dest_root: str, dry_run: bool, report: dict):
    """
    Walk both sorted directory lists front to back and create every source
    directory the destination lacks. Destination-only directories are left
    for remove_directories().
    """
    s = d = 0
    while s < len(source_dirs):
        src = source_dirs[s].path
        if d < len(dest_dirs):
            dst = dest_dirs[d].path
            if src == dst:
                s += 1
                d += 1
                continue
            if src > dst:
                # Extra destination directory, handled in phase 3.
                d += 1
                continue
        create_directory(dest_fs, dest_root, src, dry_run, report)
        s += 1


# ── Phase 2: copy new/updated files, delete obsolete ones ─────────────────────

def sync_files(source_files: list[PathEntry], dest_files: list[PathEntry],
               source_fs, source_root: str, dest_fs, dest_root: str,
               dry_run: bool, report: dict):
    """Merge both sorted file lists until both are exhausted."""
    s = d = 0
    while s < len(source_files) or d < len(dest_files):
        if s < len(source_files) and d < len(dest_files):
            src = source_files[s]
            dst = dest_files[d]
            if src.path == dst.path:
                _sync_existing(src, dst, source_fs, source_root, dest_fs, dest_root,
                               dry_run, report)
                s += 1
                d += 1
            elif src.path < dst.path:
                copy_new(source_fs, dest_fs, source_root, dest_root, src.path,
                         dry_run, report)
                s += 1
            else:
                delete_obsolete(dest_fs, dest_root, dst.path, dry_run, report)
                d += 1
        elif s < len(source_files):
            copy_new(source_fs, dest_fs, source_root, dest_root, source_files[s].path,
                     dry_run, report)
            s += 1
        else:
            delete_obsolete(dest_fs, dest_root, dest_files[d].path, dry_run, report)
            d += 1


def _sync_existing(src: PathEntry, dst: PathEntry, source_fs, source_root: str,
                   dest_fs, dest_root: str, dry_run: bool, report: dict):
    """Same file on both sides: copy over only if the destination is older."""
    if src.modified_at is None or dst.modified_at is None:
        warn(f"  copy failed: {src.path}: modification time unavailable (permissions?)")
        record_failure(report, COPY_UPDATED, src.path,
                       OSError("modification time unavailable"))
        return
    if is_outdated(dst.modified_at, src.modified_at):
        copy_updated(source_fs, dest_fs, source_root, dest_root, src.path,
                     dry_run, report)
    else:
        vlog(f"  [SKIP] {src.path}")


# ── Phase 3: remove obsolete directories, deepest first ──────────────────────

def remove_directories(source_dirs: list[PathEntry], dest_dirs: list[PathEntry],
                       dest_fs, dest_root: str, dry_run: bool, report: dict):
    """
    Walk both sorted directory lists back to front. A child path always
    sorts after its parent, so nested directories go before their parents.
    """
    s = len(source_dirs) - 1
    d = len(dest_dirs) - 1
    while d >= 0:
        dst = dest_dirs[d].path
        if s >= 0:
            src = source_dirs[s].path
            if src == dst:
                s -= 1
                d -= 1
                continue
            if src > dst:
                s -= 1
                continue
        remove_directory(dest_fs, dest_root, dst, dry_run, report)
        d -= 1


def synchronize(source_root: str, source_entries: list[PathEntry],
                dest_root: str, dest_entries: list[PathEntry],
                source_fs, dest_fs, dry_run: bool = False) -> dict:
    """
    Mirror the normalized source entries onto the destination.

    Both entry lists must come from normalize_entries(). Each phase runs to
    completion before the next one starts; individual failures are
    recorded in the returned report and never stop the run.
    """
    source_dirs, source_files = split_entries(source_entries)
    dest_dirs, dest_files = split_entries(dest_entries)
    report = new_report()

    create_directories(source_dirs, dest_dirs, dest_fs, dest_root, dry_run, report)
    sync_files(source_files, dest_files, source_fs, source_root, dest_fs, dest_root,
               dry_run, report)
    remove_directories(source_dirs, dest_dirs, dest_fs, dest_root, dry_run, report)
    return report


def count_actions(report: dict) -> dict:
    counts = {a: 0 for a in (MAKE_DIR, COPY_NEW, COPY_UPDATED, DELETE_FILE, REMOVE_DIR)}
    for action, _ in report["actions"]:
        counts[action] += 1
    return counts


def run_mirror(source_root: str, dest_root: str, source_fs, dest_fs,
               exclude_dirs=None, exclude_exts=None, dry_run=False) -> dict:
    """Scan both roots, then mirror source onto destination. Returns the report."""
    print(f"\n{'=' * 64}")
    print(f"  Mirror  {source_root}")
    print(f"    →     {dest_root}")
    print(f"{'=' * 64}")
    if dry_run:
        print("  *** DRY-RUN — no files will be changed ***")
    print()

    if exclude_exts:
        log(f"[exclude] extensions: {', '.join(exclude_exts)}")
    if exclude_dirs:
        log(f"[exclude] directories: {', '.join(exclude_dirs)}")

    # ── 1. Scan both trees ──────────────────────────────────────────────────
    log("[scan] Reading source tree …")
    source_raw = enumerate_tree(source_fs, source_root, exclude_dirs, exclude_exts)
    if source_raw is None:
        raise RuntimeError(f"source root is inside a trash folder "
                           f"(\"{_cfg.TRASH_MARKER}\"): {source_root}")
    log(f"[scan] {len(source_raw)} source entries found")

    log("[scan] Reading destination tree …")
    dest_raw = enumerate_tree(dest_fs, dest_root)
    log(f"[scan] {len(dest_raw or [])} destination entries found")

    # ── 2. Sort, relativize, capture timestamps ─────────────────────────────
    log("[prep] Sorting trees …")
    source_entries = normalize_entries(source_fs, source_root, source_raw)
    dest_entries = normalize_entries(dest_fs, dest_root, dest_raw)

    # ── 3. Mirror ───────────────────────────────────────────────────────────
    log("[sync] Synchronizing …")
    report = synchronize(source_root, source_entries, dest_root, dest_entries,
                         source_fs, dest_fs, dry_run=dry_run)

    counts = count_actions(report)
    if not report["actions"]:
        log("[sync] Nothing to do — already in sync ✓")

    print()
    print(f"{'─' * 64}")
    print(" SUMMARY")
    print(f"  Dirs created : {counts[MAKE_DIR]}")
    print(f"  Files new    : {counts[COPY_NEW]}")
    print(f"  Files updated: {counts[COPY_UPDATED]}")
    print(f"  Files deleted: {counts[DELETE_FILE]}")
    print(f"  Dirs removed : {counts[REMOVE_DIR]}")
    print(f"  Failures     : {len(report['failures'])}")
    print(f"{'─' * 64}")
    return report
