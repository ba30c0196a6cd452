"""
File utilities (timestamp comparison, root paths)
"""
from datetime import datetime


def truncate_to_second(ts: datetime) -> tuple[int, int, int, int, int]:
    """(year, day-of-year, hour, minute, second) of a UTC timestamp."""
    tt = ts.utctimetuple()
    return tt.tm_year, tt.tm_yday, tt.tm_hour, tt.tm_min, tt.tm_sec


def is_outdated(dest_mtime: datetime, source_mtime: datetime) -> bool:
    """
    True if the destination copy is strictly older than the source.
    Sub-second differences are ignored: some filesystems (NAS, FAT) report
    a freshly copied file a few milliseconds off the original.
    """
    return truncate_to_second(dest_mtime) < truncate_to_second(source_mtime)


def with_trailing_sep(path: str, sep: str) -> str:
    """Return *path* ending in exactly one *sep* ("/data//" becomes "/data/")."""
    return path.rstrip(sep) + sep


def parent_of(rel: str) -> str:
    """Parent of a '/'-separated relative path ('' at the top level)."""
    head, _, _ = rel.rpartition("/")
    return head
