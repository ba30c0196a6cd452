"""treesync - one-way mirroring of a directory tree"""

__version__ = "0.1.0"
