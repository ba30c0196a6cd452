"""
Console output for treesync: timestamped lines on stdout
"""
from datetime import datetime

_verbose = False


def set_verbose(verbose: bool):
    global _verbose
    _verbose = verbose


def log(msg: str):
    """Print *msg* prefixed with the wall-clock time ([HH:MM:SS])."""
    print(f"[{datetime.now():%H:%M:%S}] {msg}", flush=True)


def vlog(msg: str):
    """Only printed with --verbose (unchanged files, skipped folders)."""
    if _verbose:
        log(msg)


def warn(msg: str):
    log(f"⚠  {msg}")


def log_action(tag: str, rel: str, dry_run: bool = False):
    """
    One line per mirror action: "[NEW] a/b.txt", or "[NEW-DRY] a/b.txt"
    when nothing is actually changed.
    """
    if dry_run:
        tag += "-DRY"
    log(f"  [{tag}] {rel}")
