"""
Single-file transfer (upload and download) over scp
"""
import os
import posixpath
import shlex
import time

import paramiko
from scp import SCPClient, SCPException

from .. import config as _cfg
from ..core.context import Context, ContextCanceled
from ..core.exceptions import (CopyError, CreateLocalDirError, CreateRemoteDirError,
                               RemoteError, SetModTimeError)
from ..utils.file_utils import perm_string, touch_stamp
from ..utils.logging import log, vlog
from .runner import run_command

_COPY_ERRORS = (SCPException, paramiko.SSHException, OSError, EOFError, ContextCanceled)


def _cancel_check(ctx: Context):
    """scp progress callback that aborts the copy once *ctx* is done."""

    def progress(filename, size, sent):
        cause = ctx.err()
        if cause is not None:
            raise cause

    return progress


def _scp(ctx: Context, client: paramiko.SSHClient) -> SCPClient:
    return SCPClient(client.get_transport(), socket_timeout=_cfg.SCP_SOCKET_TIMEOUT,
                     progress=_cancel_check(ctx))


def upload(ctx: Context, client: paramiko.SSHClient, local: str, remote: str,
           mkdir: bool, host: str = ""):
    """
    Copy *local* to *remote*, keeping its permission bits and mtime.

    With *mkdir* the remote parent directory is created first; without it a
    missing directory makes the copy fail. The mtime is set after the copy
    with `touch`, and a failure there leaves the copied content in place.
    """
    vlog(f"[upload] {local} → {host}:{remote}")
    started = time.monotonic()

    if mkdir:
        cmd = f"mkdir -p {shlex.quote(posixpath.dirname(remote) or '.')}"
        try:
            run_command(ctx, client, cmd)
        except RemoteError as exc:
            raise CreateRemoteDirError(f"failed to create remote directory: {exc}") from exc

    cause = ctx.err()
    if cause is not None:
        raise CopyError(f"failed to copy file: {cause}") from cause

    try:
        st = os.stat(local)
        fh = open(local, "rb")
    except OSError as exc:
        raise CopyError(f"failed to open local file {local}: {exc}") from exc

    mode = perm_string(st.st_mode)
    vlog(f"[upload] file mode for {local}: {mode}")
    with fh:
        try:
            with _scp(ctx, client) as scp:
                scp.putfo(fh, remote, mode=mode, size=st.st_size)
        except _COPY_ERRORS as exc:
            raise CopyError(f"failed to copy file: {exc}") from exc

    touch_cmd = f"TZ=UTC touch -m -t {touch_stamp(st.st_mtime)} {shlex.quote(remote)}"
    try:
        run_command(ctx, client, touch_cmd)
    except RemoteError as exc:
        raise SetModTimeError(f"failed to set modification time of remote file: {exc}") from exc

    log(f"[upload ✓] {local} → {host}:{remote} in {time.monotonic() - started:.3f}s")


def download(ctx: Context, client: paramiko.SSHClient, remote: str, local: str,
             mkdir: bool, host: str = ""):
    """Copy *remote* to *local*. Permissions are not preserved."""
    vlog(f"[download] {host}:{remote} → {local}")
    started = time.monotonic()

    parent = os.path.dirname(local)
    if mkdir and parent:
        try:
            os.makedirs(parent, mode=_cfg.LOCAL_DIR_MODE, exist_ok=True)
        except OSError as exc:
            raise CreateLocalDirError(f"failed to create local directory: {exc}") from exc

    cause = ctx.err()
    if cause is not None:
        raise CopyError(f"failed to copy file: {cause}") from cause

    try:
        fh = open(local, "wb")
    except OSError as exc:
        raise CopyError(f"failed to open local file {local}: {exc}") from exc

    with fh:
        try:
            with _scp(ctx, client) as scp:
                scp.getfo(remote, fh)
            fh.flush()
            os.fsync(fh.fileno())
        except _COPY_ERRORS as exc:
            raise CopyError(f"failed to copy file: {exc}") from exc

    log(f"[download ✓] {host}:{remote} → {local} in {time.monotonic() - started:.3f}s")
