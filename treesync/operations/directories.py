"""
Directory operations for one relative path (create, remove)
"""
from ..utils.logging import log_action, warn
from .transfer import record, record_failure

MAKE_DIR = "mkdir"
REMOVE_DIR = "rmdir"


def create_directory(dest_fs, dest_root: str, rel: str, dry_run: bool, report: dict):
    """Ensure the destination directory exists, ancestors included."""
    record(report, MAKE_DIR, rel)
    log_action("MKDIR", rel + "/", dry_run)
    if dry_run:
        return
    try:
        dest_fs.make_dirs(dest_fs.join(dest_root, rel))
    except Exception as exc:
        warn(f"  create directory failed: {rel}: {exc}")
        record_failure(report, MAKE_DIR, rel, exc)


def remove_directory(dest_fs, dest_root: str, rel: str, dry_run: bool, report: dict):
    """Recursively delete an obsolete destination directory, if still there."""
    record(report, REMOVE_DIR, rel)
    log_action("RMDIR", rel + "/", dry_run)
    if dry_run:
        return
    try:
        path = dest_fs.join(dest_root, rel)
        if dest_fs.is_dir(path):
            dest_fs.remove_tree(path)
    except Exception as exc:
        warn(f"  remove directory failed: {rel}: {exc}")
        record_failure(report, REMOVE_DIR, rel, exc)
