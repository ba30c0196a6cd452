#!/usr/bin/env python3
"""
treesync  —  One-way directory mirroring
========================================

Usage:
  treesync SOURCE DEST [-e EXT,...] [-d DIR,...] [options]

Files and folders that are new or newer in SOURCE are copied to DEST;
anything in DEST that no longer exists in SOURCE is deleted.
DEST may be a local folder or sftp://[user@]host[:port]/path.

The original compact option form is accepted: -etmp,bak -dnode_modules,.git

Exit status:
  0  success (or help shown)
  1  source directory does not exist
  2  destination directory does not exist
  3  the run failed unexpectedly
"""
import sys
import argparse
import traceback
from pathlib import Path

import yaml

EXIT_SOURCE_MISSING = 1
EXIT_DEST_MISSING = 2
EXIT_FAILURE = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treesync",
        description="One-way mirror of a source directory tree onto a destination tree",
        epilog=(
            "Exit status: 0 ok, 1 source missing, 2 destination missing, 3 run failed.\n"
            "Without SOURCE/DEST the values of the selected .treesync profile are used."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("source", nargs="?", metavar="SOURCE",
                        help="Source root directory")
    parser.add_argument("destination", nargs="?", metavar="DEST",
                        help="Destination root directory or sftp:// URL")
    parser.add_argument("-e", "--exclude-ext", metavar="EXT,...",
                        help="Comma-separated file extensions to skip in the source")
    parser.add_argument("-d", "--exclude-dir", metavar="DIR,...",
                        help="Comma-separated substrings; source folders whose path "
                             "contains one are skipped with their contents")
    parser.add_argument("-n", "--dry-run", action="store_true",
                        help="Preview without applying changes")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Also show unchanged files and skipped folders")
    parser.add_argument("--profile", metavar="NAME", default=None,
                        help="Profile to use from .treesync (default: default)")
    parser.add_argument("--config", metavar="PATH", default=None,
                        help="Project config file (default: nearest .treesync)")
    return parser


# ── config ────────────────────────────────────────────────────────────────────

def load_settings(args):
    """Apply global defaults, then the selected project profile, to treesync.config."""
    import treesync.config as _cfg

    global_cfg = _cfg.load_global_config()
    if global_cfg:
        _cfg.apply_profile(global_cfg.get("defaults", {}) or {})

    if args.config:
        config_path = Path(args.config)
        if not config_path.is_file():
            print(f"error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(EXIT_FAILURE)
    else:
        config_path = _cfg.find_config()

    if config_path is None:
        if args.profile:
            print("error: no .treesync file found in this directory or any parent.",
                  file=sys.stderr)
            sys.exit(EXIT_FAILURE)
        return

    if args.verbose:
        print(f"[config] Using {config_path}")
    data = _cfg.load_config_file(config_path)
    _cfg.apply_profile(_cfg.get_profile(data, args.profile or "default"))


# ── mirror ────────────────────────────────────────────────────────────────────

def cmd_mirror(args, parser):
    """Check both roots, then run the mirror."""
    import treesync.config as _cfg
    from treesync.core.ssh_manager import SSHManager
    from treesync.core.sync_engine import run_mirror
    from treesync.operations.filesystem import LocalFileSystem, SFTPFileSystem
    from treesync.utils.file_utils import with_trailing_sep
    from treesync.utils.logging import set_verbose, warn

    set_verbose(args.verbose)
    try:
        load_settings(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        warn(f"Invalid configuration: {exc}")
        sys.exit(EXIT_FAILURE)

    source = args.source or _cfg.SOURCE_ROOT
    destination = args.destination or _cfg.DEST_ROOT
    if not source or not destination:
        parser.error("SOURCE and DEST are required (on the command line or in a profile)")

    exclude_exts = (_cfg.split_extensions(args.exclude_ext)
                    if args.exclude_ext is not None else _cfg.EXCLUDE_EXTS)
    exclude_dirs = (_cfg.split_list(args.exclude_dir)
                    if args.exclude_dir is not None else _cfg.EXCLUDE_DIRS)

    source_fs = LocalFileSystem()
    source_root = with_trailing_sep(source, source_fs.sep)
    if not source_fs.is_dir(source_root):
        print(f"error: source directory doesn't exist: {source}", file=sys.stderr)
        sys.exit(EXIT_SOURCE_MISSING)

    mgr = None
    try:
        if destination.startswith("sftp://"):
            dest_path = _cfg.parse_sftp_url(destination)
            mgr = SSHManager()
            dest_fs = SFTPFileSystem(mgr)
        else:
            dest_path = destination
            dest_fs = LocalFileSystem()
        dest_root = with_trailing_sep(dest_path, dest_fs.sep)

        if not dest_fs.is_dir(dest_root):
            print(f"error: destination directory doesn't exist: {destination}",
                  file=sys.stderr)
            sys.exit(EXIT_DEST_MISSING)

        report = run_mirror(source_root, dest_root, source_fs, dest_fs,
                            exclude_dirs=exclude_dirs, exclude_exts=exclude_exts,
                            dry_run=args.dry_run)
        if report["failures"]:
            warn(f"{len(report['failures'])} operation(s) failed — see messages above.")

    except KeyboardInterrupt:
        print()
        warn("Interrupted by user.")
        sys.exit(EXIT_FAILURE)

    except Exception as exc:
        warn(f"Mirror failed: {exc}")
        if args.verbose:
            traceback.print_exc()
        sys.exit(EXIT_FAILURE)

    finally:
        if mgr is not None:
            mgr.disconnect()


# ── main ──────────────────────────────────────────────────────────────────────

def main(argv=None):
    """CLI entry point for treesync"""
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv:
        parser.print_help()
        return

    args = parser.parse_args(argv)
    cmd_mirror(args, parser)


if __name__ == "__main__":
    main()
