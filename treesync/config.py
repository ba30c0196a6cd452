"""
Configuration constants for treesync
"""
import os
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

import yaml

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS  ── overridden by YAML config or apply_profile()
# ══════════════════════════════════════════════════════════════════════════════

SOURCE_ROOT: Optional[str] = None
DEST_ROOT: Optional[str] = None

# Source-side filters. Extensions are stored without the leading dot.
EXCLUDE_EXTS: list[str] = []
EXCLUDE_DIRS: list[str] = []

# Any directory whose path contains this marker is never descended into.
TRASH_MARKER = "$RECYCLE"

CONFIG_FILE_NAME = ".treesync"

# Remote destination (sftp://user@host:port/path)
SSH_HOST = "example.com"
SSH_PORT = 22
SSH_USER = "root"
# Path to your private key, or None to use ssh-agent / ~/.ssh/id_*
SSH_KEY_PATH: Optional[str] = None
SSH_PASSWORD: Optional[str] = None  # only if you use password auth

# Connection retry settings (mirror operations themselves are never retried)
RETRY_MAX = 5
RETRY_BASE_DELAY = 2.0  # seconds; doubles each attempt


def split_list(value) -> list[str]:
    """Turn a comma-separated string or a YAML list into a clean list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(v) for v in value]
    return [item.strip() for item in items if item.strip()]


def split_extensions(value) -> list[str]:
    """Like split_list, but drops a leading '.' so '.tmp' and 'tmp' are the same."""
    return [ext[1:] if ext.startswith(".") else ext for ext in split_list(value)
            if ext != "."]


# ══════════════════════════════════════════════════════════════════════════════
#  GLOBAL CONFIG FILE  ── $XDG_CONFIG_HOME/treesync/config.yaml
# ══════════════════════════════════════════════════════════════════════════════

def get_global_config_dir() -> Path:
    """Return the global config directory for treesync."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / "treesync"
    if os.name == "nt":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "treesync"
    return Path.home() / ".config" / "treesync"


def load_global_config() -> dict:
    """Load global config from the treesync config directory."""
    from .utils.logging import warn

    cfg_path = get_global_config_dir() / "config.yaml"
    if not cfg_path.is_file():
        return {}
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        warn(f"Ignoring unreadable global config {cfg_path}: {exc}")
        return {}
    if not isinstance(data, dict):
        warn(f"Ignoring global config {cfg_path}: expected a mapping")
        return {}
    return data


# ══════════════════════════════════════════════════════════════════════════════
#  PROJECT CONFIG FILE  ── .treesync (searched upward)
# ══════════════════════════════════════════════════════════════════════════════

def find_config(start: Optional[Path] = None) -> Optional[Path]:
    """
    Search upward from *start* (default: cwd) for a .treesync YAML file.
    Returns the Path if found, or None if no .treesync exists in any parent.
    """
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config_file(path: Path) -> dict:
    """Parse a .treesync YAML file and return its contents as a dict."""
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at the top level")
    profiles = data.get("profiles") or []
    if not isinstance(profiles, list) or not all(isinstance(p, dict) for p in profiles):
        raise ValueError(f"{path}: \"profiles\" must be a list of mappings")
    return data


def get_profile(data: dict, profile_name: str = "default") -> dict:
    """
    Extract a named profile from a .treesync or config.yaml data dict.
    Falls back to the first profile if the named one is not found.
    Returns a flat profile dict merged with top-level defaults.
    """
    defaults = data.get("defaults", {}) or {}
    profiles = data.get("profiles", []) or []
    if not profiles:
        return defaults.copy()
    profile = next((p for p in profiles if p.get("name") == profile_name), None)
    if profile is None:
        profile = profiles[0]
    merged = defaults.copy()
    merged.update(profile)
    return merged


# ══════════════════════════════════════════════════════════════════════════════
#  APPLY PROFILE  ── mutates module-level variables
# ══════════════════════════════════════════════════════════════════════════════

def apply_profile(profile: dict):
    """
    Apply a profile dict to the module-level config variables.
    Supports keys: source, destination, exclude_exts, exclude_dirs,
                   server, port, user (or username), ssh_key, ssh_password.
    """
    global SOURCE_ROOT, DEST_ROOT, EXCLUDE_EXTS, EXCLUDE_DIRS
    global SSH_HOST, SSH_PORT, SSH_USER, SSH_KEY_PATH, SSH_PASSWORD

    if "source" in profile:
        SOURCE_ROOT = str(Path(str(profile["source"])).expanduser())
    if "destination" in profile:
        dest = str(profile["destination"])
        DEST_ROOT = dest if dest.startswith("sftp://") else str(Path(dest).expanduser())
    if "exclude_exts" in profile:
        EXCLUDE_EXTS = split_extensions(profile["exclude_exts"])
    if "exclude_dirs" in profile:
        EXCLUDE_DIRS = split_list(profile["exclude_dirs"])
    if "server" in profile:
        SSH_HOST = str(profile["server"])
    if "port" in profile:
        SSH_PORT = int(profile["port"])
    if "user" in profile:
        SSH_USER = str(profile["user"])
    elif "username" in profile:
        SSH_USER = str(profile["username"])
    if "ssh_key" in profile:
        SSH_KEY_PATH = str(profile["ssh_key"]) if profile["ssh_key"] else None
    if "ssh_password" in profile:
        SSH_PASSWORD = str(profile["ssh_password"]) if profile["ssh_password"] else None


def parse_sftp_url(url: str) -> str:
    """
    Apply host, port and user from an sftp://[user@]host[:port]/path URL
    and return the remote path.
    """
    global SSH_HOST, SSH_PORT, SSH_USER

    parts = urlsplit(url)
    if parts.scheme != "sftp" or not parts.hostname:
        raise ValueError(f"not an sftp:// URL: {url!r}")
    SSH_HOST = parts.hostname
    if parts.port:
        SSH_PORT = parts.port
    if parts.username:
        SSH_USER = parts.username
    return parts.path or "/"
