"""
Executer: run commands and move files on one remote host over ssh
"""
from .. import config as _cfg
from ..operations.runner import run_command
from ..operations.transfer import download, upload
from ..utils.logging import vlog
from .context import Context
from .ssh_manager import SSHManager
from .sync_engine import run_sync


class Executer:
    """
    Executes commands on a remote server via ssh, authenticating as *user*
    with the private key at *private_key*. The key is read once, here.

    Not thread-safe: issue one operation at a time.
    """

    def __init__(self, user: str, private_key: str):
        self._mgr = SSHManager(user, private_key)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def host(self):
        return self._mgr.host

    def connect(self, ctx: Context, host: str):
        """Connect to *host* ("host", "host:port" or "[v6]:port")."""
        self._mgr.connect(ctx, host)

    def close(self):
        self._mgr.close()

    def run(self, ctx: Context, cmd: str) -> list[str]:
        """Run *cmd* remotely; return its non-empty stdout lines."""
        client = self._mgr.require_client()
        return run_command(ctx, client, cmd)

    def upload(self, ctx: Context, local: str, remote: str, mkdir: bool = False):
        client = self._mgr.require_client()
        upload(ctx, client, local, remote, mkdir, host=self.host)

    def download(self, ctx: Context, remote: str, local: str, mkdir: bool = False):
        client = self._mgr.require_client()
        download(ctx, client, remote, local, mkdir, host=self.host)

    def sync(self, ctx: Context, local_dir: str, remote_dir: str) -> list[str]:
        """Upload local files that differ from *remote_dir*; return their relative paths."""
        self._mgr.require_client()
        vlog(f"[sync] {local_dir} → {self.host}:{remote_dir} "
             f"(mtime tolerance {_cfg.MTIME_TOLERANCE:g}s)")
        return run_sync(ctx, self, local_dir, remote_dir)


def new_executers(user: str, private_key: str, count: int) -> list[Executer]:
    """Create *count* independent executers sharing one identity."""
    return [Executer(user, private_key) for _ in range(count)]
