"""Operations (filesystem access, scan, file and directory actions)"""
from .filesystem import LocalFileSystem, SFTPFileSystem
from .scanner import enumerate_tree, normalize_entries
from .transfer import copy_new, copy_updated, delete_obsolete
from .directories import create_directory, remove_directory

__all__ = [
    "LocalFileSystem", "SFTPFileSystem",
    "enumerate_tree", "normalize_entries",
    "copy_new", "copy_updated", "delete_obsolete",
    "create_directory", "remove_directory",
]
