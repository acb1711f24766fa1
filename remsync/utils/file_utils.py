"""
File utilities (mtime comparison, mode and timestamp formatting)
"""
import os
from datetime import datetime, timezone
from .. import config as _cfg


def _file_changed(local_mtime: float, local_size: int,
                  remote_mtime: float, remote_size: int) -> bool:
    """True if the two sides differ in size or by more than the mtime tolerance."""
    if local_size != remote_size:
        return True
    return abs(local_mtime - remote_mtime) > _cfg.MTIME_TOLERANCE


def perm_string(st_mode: int) -> str:
    """Permission bits as four octal digits, e.g. '0644'."""
    return f"{st_mode & 0o777:04o}"


def touch_stamp(mtime: float) -> str:
    """Format an epoch mtime for `touch -t` (UTC, [[CC]YY]MMDDhhmm[.ss])."""
    return datetime.fromtimestamp(mtime, tz=timezone.utc).strftime("%Y%m%d%H%M.%S")


def to_posix(rel_path: str) -> str:
    """Normalize a native relative path to forward slashes."""
    if os.sep != "/":
        rel_path = rel_path.replace(os.sep, "/")
    return rel_path
