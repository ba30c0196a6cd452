"""
Filesystem capability used by the scanner and the sync engine.

Two implementations share the same small surface:

  is_dir(path)                  existing directory?
  list_dir(path)                ([sub-directory paths], [file paths])
  get_mtime(path)               last-modified time as an aware UTC datetime
  copy_file(src, dst, overwrite)
  delete_file(path)
  make_dirs(path)               create path and missing ancestors (idempotent)
  remove_tree(path)             delete a directory and everything below it
  join(root, rel)               root + '/'-separated relative path

Paths are plain strings; roots carry a trailing separator (`sep`).
The copy source is always a local file.
"""
import os
import shutil
import stat
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from ..utils.file_utils import parent_of

if TYPE_CHECKING:
    from ..core.ssh_manager import SSHManager


class LocalFileSystem:
    """The local disk, through os / shutil."""

    sep = os.sep

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def list_dir(self, path: str) -> tuple[list[str], list[str]]:
        dirs: list[str] = []
        files: list[str] = []
        with os.scandir(path) as it:
            for entry in it:
                # Directory symlinks are not followed (they could loop).
                if entry.is_dir(follow_symlinks=False):
                    dirs.append(entry.path)
                elif entry.is_file():
                    files.append(entry.path)
        return dirs, files

    def get_mtime(self, path: str) -> datetime:
        return datetime.fromtimestamp(os.stat(path).st_mtime, tz=timezone.utc)

    def copy_file(self, src: str, dst: str, overwrite: bool = False):
        if not overwrite and os.path.lexists(dst):
            raise FileExistsError(f"destination file exists: {dst}")
        shutil.copy2(src, dst)

    def delete_file(self, path: str):
        os.remove(path)

    def make_dirs(self, path: str):
        os.makedirs(path, exist_ok=True)

    def remove_tree(self, path: str):
        shutil.rmtree(path)

    def join(self, root: str, rel: str) -> str:
        return root + rel.replace("/", self.sep)


class SFTPFileSystem:
    """A remote tree reached through an SSHManager (paramiko SFTP)."""

    sep = "/"

    def __init__(self, mgr: "SSHManager"):
        self.mgr = mgr

    def is_dir(self, path: str) -> bool:
        try:
            attrs = self.mgr.sftp_stat(path)
        except FileNotFoundError:
            return False
        return stat.S_ISDIR(attrs.st_mode or 0)

    def list_dir(self, path: str) -> tuple[list[str], list[str]]:
        base = path.rstrip("/") + "/"
        dirs: list[str] = []
        files: list[str] = []
        for attrs in self.mgr.sftp_listdir_attr(path):
            mode = attrs.st_mode or 0
            full = base + attrs.filename
            if stat.S_ISDIR(mode):
                dirs.append(full)
            elif stat.S_ISREG(mode):
                files.append(full)
        return dirs, files

    def get_mtime(self, path: str) -> datetime:
        attrs = self.mgr.sftp_stat(path)
        if attrs.st_mtime is None:
            raise OSError(f"no modification time reported for {path}")
        return datetime.fromtimestamp(attrs.st_mtime, tz=timezone.utc)

    def copy_file(self, src: str, dst: str, overwrite: bool = False):
        if not overwrite:
            try:
                self.mgr.sftp_stat(dst)
            except FileNotFoundError:
                pass
            else:
                raise FileExistsError(f"destination file exists: {dst}")
        self.mgr.sftp_put(src, dst)
        # Keep the source mtime, otherwise every run would see a newer copy.
        st = os.stat(src)
        self.mgr.sftp_utime(dst, (st.st_atime, st.st_mtime))

    def delete_file(self, path: str):
        self.mgr.sftp_remove(path)

    def make_dirs(self, path: str):
        missing: list[str] = []
        current = path.rstrip("/")
        while current and not self.is_dir(current):
            missing.append(current)
            current = parent_of(current)
        for d in reversed(missing):
            self.mgr.sftp_mkdir(d)

    def remove_tree(self, path: str):
        dirs, files = self.list_dir(path)
        for f in files:
            self.mgr.sftp_remove(f)
        for d in dirs:
            self.remove_tree(d)
        self.mgr.sftp_rmdir(path.rstrip("/"))

    def join(self, root: str, rel: str) -> str:
        return root + rel
