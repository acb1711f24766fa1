"""
SSH connection manager for a single remote host
"""
import socket
from typing import Optional

import paramiko

from .. import config as _cfg
from ..utils.logging import log, vlog
from .context import Context
from .exceptions import DialError, HandshakeError, IdentityError, NotConnectedError


def split_host_port(host: str) -> tuple[str, int]:
    """
    Split "host", "host:port" or "[v6addr]:port" into (host, port).
    A host without a port gets config.DEFAULT_PORT; an empty or non-numeric
    port raises ValueError.
    """
    if host.startswith("["):
        addr, _, rest = host[1:].partition("]")
        if rest.startswith(":") and rest[1:]:
            return addr, int(rest[1:])
        return addr, _cfg.DEFAULT_PORT
    if host.count(":") == 1:
        name, port = host.split(":")
        return name, int(port)
    # bare hostname or unbracketed IPv6 address
    return host, _cfg.DEFAULT_PORT


def load_private_key(path: str) -> paramiko.PKey:
    """Read and parse a private key file once, at construction time."""
    try:
        return paramiko.PKey.from_path(path)
    except (OSError, paramiko.SSHException, paramiko.UnknownKeyType, ValueError) as exc:
        raise IdentityError(f"unable to read private key {path}: {exc}") from exc


class SSHManager:
    """
    Owns the paramiko SSHClient for one host.

    Host keys are accepted without verification (AutoAddPolicy): remsync
    targets disposable and CI hosts where pinning is not available. This is a
    trust trade-off, not an oversight.

    Not safe for concurrent use: one command or transfer at a time.
    """

    def __init__(self, user: str, private_key: str):
        self.user = user
        self.private_key = private_key
        self._pkey = load_private_key(private_key)
        self._ssh: Optional[paramiko.SSHClient] = None
        self.host: Optional[str] = None

    # ── connection ─────────────────────────────────────────────────────────

    def connect(self, ctx: Context, host: str):
        try:
            hostname, port = split_host_port(host)
        except ValueError as exc:
            raise DialError(f"failed to dial: invalid address {host!r}: {exc}") from exc
        vlog(f"[SSH] connecting to {self.user}@{hostname}:{port} …")

        cause = ctx.err()
        if cause is not None:
            raise DialError(f"failed to dial: {cause}") from cause

        timeout = ctx.remaining()
        if timeout is None:
            timeout = _cfg.CONNECT_TIMEOUT
        try:
            sock = socket.create_connection((hostname, port), timeout=timeout)
        except OSError as exc:
            cause = ctx.err() or exc
            raise DialError(f"failed to dial: {exc}") from cause

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            client.connect(hostname=hostname, port=port, username=self.user,
                           pkey=self._pkey, sock=sock,
                           allow_agent=False, look_for_keys=False,
                           timeout=timeout, banner_timeout=_cfg.BANNER_TIMEOUT,
                           auth_timeout=_cfg.AUTH_TIMEOUT)
        except (paramiko.SSHException, OSError, EOFError) as exc:
            client.close()
            sock.close()
            raise HandshakeError(
                f"failed to create client connection to {hostname}:{port}: {exc}") from exc

        self._ssh = client
        self.host = f"{hostname}:{port}"
        log(f"[SSH] connected to {self.host} ✓")

    def close(self):
        """Release the connection. A no-op when never connected."""
        if self._ssh is None:
            return
        try:
            self._ssh.close()
        finally:
            self._ssh = None
            vlog(f"[SSH] disconnected from {self.host}")

    @property
    def client(self) -> Optional[paramiko.SSHClient]:
        return self._ssh

    def require_client(self) -> paramiko.SSHClient:
        """Call before any remote operation."""
        if self._ssh is None:
            raise NotConnectedError()
        return self._ssh
