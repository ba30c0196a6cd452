"""
Path entries produced by the scanner and consumed by the sync engine
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "dir"


@dataclass(frozen=True)
class PathEntry:
    """
    One file or directory found under a root.

    `path` is absolute after enumeration and root-relative ('/'-separated)
    after normalization. `modified_at` is only set on normalized files and
    stays None when the timestamp could not be read.
    """
    kind: EntryKind
    path: str
    modified_at: Optional[datetime] = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def split_entries(entries: list[PathEntry]) -> tuple[list[PathEntry], list[PathEntry]]:
    """Split a normalized sequence into (directories, files), keeping order."""
    dirs = [e for e in entries if e.is_dir]
    files = [e for e in entries if not e.is_dir]
    return dirs, files
