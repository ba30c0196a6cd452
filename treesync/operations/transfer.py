"""
File operations for one relative path (copy new, copy updated, delete)

Each helper prints its action line, records it in the run report, and
absorbs its own failure: a failed operation is reported and the caller
moves on to the next entry.
"""
from ..utils.logging import log_action, warn
from ..utils.file_utils import parent_of

COPY_NEW = "new"
COPY_UPDATED = "update"
DELETE_FILE = "delete"


def record(report: dict, action: str, rel: str):
    report["actions"].append((action, rel))


def record_failure(report: dict, action: str, rel: str, exc: Exception):
    report["failures"].append((action, rel, str(exc)))


def copy_new(source_fs, dest_fs, source_root: str, dest_root: str,
             rel: str, dry_run: bool, report: dict):
    """Copy a file that has no destination counterpart yet."""
    record(report, COPY_NEW, rel)
    log_action("NEW", rel, dry_run)
    if dry_run:
        return
    try:
        parent = parent_of(rel)
        if parent:
            dest_fs.make_dirs(dest_fs.join(dest_root, parent))
        dest_fs.copy_file(source_fs.join(source_root, rel),
                          dest_fs.join(dest_root, rel), overwrite=False)
    except Exception as exc:
        warn(f"  copy failed: {rel}: {exc}")
        record_failure(report, COPY_NEW, rel, exc)


def copy_updated(source_fs, dest_fs, source_root: str, dest_root: str,
                 rel: str, dry_run: bool, report: dict):
    """Overwrite an outdated destination file with the source version."""
    record(report, COPY_UPDATED, rel)
    log_action("UPDATE", rel, dry_run)
    if dry_run:
        return
    try:
        dest_fs.copy_file(source_fs.join(source_root, rel),
                          dest_fs.join(dest_root, rel), overwrite=True)
    except Exception as exc:
        warn(f"  copy failed: {rel}: {exc}")
        record_failure(report, COPY_UPDATED, rel, exc)


def delete_obsolete(dest_fs, dest_root: str, rel: str, dry_run: bool, report: dict):
    """Delete a destination file that no longer exists in the source."""
    record(report, DELETE_FILE, rel)
    log_action("DEL", rel, dry_run)
    if dry_run:
        return
    try:
        dest_fs.delete_file(dest_fs.join(dest_root, rel))
    except Exception as exc:
        warn(f"  delete failed: {rel}: {exc}")
        record_failure(report, DELETE_FILE, rel, exc)
