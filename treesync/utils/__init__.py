"""Utilities (logging, retry, exclusion filters, file utilities)"""
from .logging import log, vlog, warn, log_action, set_verbose
from .retry import retried
from .ignore_patterns import is_excluded_dir, is_excluded_file
from .file_utils import is_outdated, truncate_to_second, with_trailing_sep

__all__ = [
    "log", "vlog", "warn", "log_action", "set_verbose",
    "retried",
    "is_excluded_dir", "is_excluded_file",
    "is_outdated", "truncate_to_second", "with_trailing_sep",
]
