"""
SSH connection manager for an sftp:// destination (keep-alive, reconnect on demand)
"""
from typing import Optional
import paramiko
from .. import config as _cfg
from ..utils.logging import log, vlog
from ..utils.retry import retried


class SSHManager:
    """
    Wraps paramiko SSHClient + SFTPClient for a remote mirror destination.
    Every sftp_* call reconnects first if the transport has gone away;
    only connecting is retried, never the operation itself.
    """

    def __init__(self):
        self._ssh: Optional[paramiko.SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None

    # ── connection ─────────────────────────────────────────────────────────

    @staticmethod
    def _connect_kwargs() -> dict:
        kw: dict = dict(hostname=_cfg.SSH_HOST, port=_cfg.SSH_PORT, username=_cfg.SSH_USER,
                        timeout=20, banner_timeout=30, auth_timeout=30)
        if _cfg.SSH_KEY_PATH:
            kw["key_filename"] = _cfg.SSH_KEY_PATH
        if _cfg.SSH_PASSWORD:
            kw["password"] = _cfg.SSH_PASSWORD
        return kw

    @retried
    def connect(self):
        """Open a fresh SSH session and SFTP channel, dropping any stale one."""
        self._close_quietly()
        log(f"[SSH] connecting to {_cfg.SSH_USER}@{_cfg.SSH_HOST}:{_cfg.SSH_PORT} …")
        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        client.connect(**self._connect_kwargs())
        client.get_transport().set_keepalive(30)
        self._ssh = client
        self._sftp = client.open_sftp()
        log("[SSH] connected ✓")

    def _close_quietly(self):
        for channel in (self._sftp, self._ssh):
            if channel is None:
                continue
            try:
                channel.close()
            except Exception as exc:
                vlog(f"[SSH] close failed: {exc}")
        self._ssh = None
        self._sftp = None

    def disconnect(self):
        if self._ssh is None:
            return
        self._close_quietly()
        log("[SSH] disconnected.")

    def is_alive(self) -> bool:
        transport = self._ssh.get_transport() if self._ssh else None
        return transport is not None and transport.is_active()

    def ensure_connected(self):
        """Call before any remote operation."""
        if not self.is_alive():
            self.connect()

    # ── sftp ops ────────────────────────────────────────────────────────────

    def sftp_stat(self, remote: str) -> paramiko.SFTPAttributes:
        self.ensure_connected()
        return self._sftp.stat(remote)

    def sftp_listdir_attr(self, remote: str) -> list[paramiko.SFTPAttributes]:
        self.ensure_connected()
        return self._sftp.listdir_attr(remote)

    def sftp_put(self, local: str, remote: str):
        self.ensure_connected()
        self._sftp.put(local, remote)

    def sftp_utime(self, remote: str, times: tuple[float, float]):
        self.ensure_connected()
        self._sftp.utime(remote, times)

    def sftp_remove(self, remote: str):
        self.ensure_connected()
        self._sftp.remove(remote)

    def sftp_mkdir(self, remote: str):
        self.ensure_connected()
        self._sftp.mkdir(remote)

    def sftp_rmdir(self, remote: str):
        self.ensure_connected()
        self._sftp.rmdir(remote)
