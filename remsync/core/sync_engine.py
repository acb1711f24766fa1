"""
Sync engine - decision logic and orchestration
"""
import os
import posixpath
from typing import TYPE_CHECKING

from ..operations.scanner import FileProperties, local_inventory, remote_inventory
from ..utils.file_utils import _file_changed
from ..utils.logging import log, vlog
from .context import Context
from .exceptions import LocalInventoryError, RemoteError, RemoteInventoryError, UploadError

if TYPE_CHECKING:
    from .executer import Executer


def find_unmatched(local_files: dict[str, FileProperties],
                   remote_files: dict[str, FileProperties]) -> list[str]:
    """
    Returns the sorted local paths that must be uploaded: missing remotely,
    different size, or mtime off by more than the tolerance.
    Remote-only files are ignored.
    """
    unmatched: list[str] = []
    for rel, l_meta in local_files.items():
        r_meta = remote_files.get(rel)
        if r_meta is None:
            vlog(f"  [NEW] {rel}")
            unmatched.append(rel)
        elif _file_changed(l_meta.mod_time, l_meta.size, r_meta.mod_time, r_meta.size):
            vlog(f"  [CHANGED] {rel}")
            unmatched.append(rel)
    return sorted(unmatched)


def run_sync(ctx: Context, executer: "Executer", local_dir: str, remote_dir: str) -> list[str]:
    """
    Upload every unmatched file from *local_dir* to *remote_dir*, one at a
    time in sorted order, and return the uploaded relative paths.

    The first failed upload stops the run; files already uploaded stay.
    """
    try:
        local_files = local_inventory(local_dir)
    except RemoteError as exc:
        raise LocalInventoryError(
            f"failed to get local files properties for {local_dir}: {exc}") from exc
    vlog(f"[scan] {len(local_files)} local file(s) in {local_dir}")

    try:
        remote_files = remote_inventory(ctx, executer.run, remote_dir)
    except RemoteError as exc:
        raise RemoteInventoryError(
            f"failed to get remote files properties for {remote_dir}: {exc}") from exc
    vlog(f"[scan] {len(remote_files)} remote file(s) in {remote_dir}")

    unmatched = find_unmatched(local_files, remote_files)
    if not unmatched:
        log(f"[sync] {local_dir} → {remote_dir}: nothing to do — already in sync ✓")
        return []

    log(f"[sync] {len(unmatched)} file(s) to upload to {remote_dir}")
    for rel in unmatched:
        local_path = os.path.join(local_dir, *rel.split("/"))
        remote_path = posixpath.join(remote_dir, rel)
        try:
            executer.upload(ctx, local_path, remote_path, True)
        except RemoteError as exc:
            raise UploadError(f"failed to upload {local_path} to {remote_path}: {exc}") from exc
        log(f"  [SYNC ✓] {local_path} → {remote_path}")

    return unmatched
