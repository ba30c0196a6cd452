"""
Source-side exclusion filters (directory substrings, file extensions)
"""
from typing import Optional


def is_excluded_dir(path: str, exclude_dirs: Optional[list]) -> bool:
    """
    True if the directory's full path contains any excluded substring.

    This is a literal substring test on the whole path, not a path-segment
    match: 'build' also excludes 'rebuild_cache/' and anything under it.
    """
    if not exclude_dirs:
        return False
    return any(part in path for part in exclude_dirs)


def is_excluded_file(path: str, exclude_exts: Optional[list]) -> bool:
    """True if the file's full path ends with '.' + an excluded extension."""
    if not exclude_exts:
        return False
    return any(path.endswith("." + ext) for ext in exclude_exts)
