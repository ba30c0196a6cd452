"""Core functionality"""
from .ssh_manager import SSHManager
from .sync_engine import run_mirror, synchronize

__all__ = ["SSHManager", "run_mirror", "synchronize"]
