"""
File inventory operations (local and remote)
"""
import os
import posixpath
import shlex
import stat
from dataclasses import dataclass
from typing import Callable

from ..core.context import Context
from ..core.exceptions import ParseError, RemoteCommandError, WalkError
from ..utils.file_utils import to_posix
from ..utils.logging import vlog

# find output: <path>:<size>:<mtime epoch seconds>
_LISTING_FMT = "%n:%s:%Y"

RunFn = Callable[[Context, str], list]


@dataclass(frozen=True)
class FileProperties:
    size: int
    mod_time: float
    name: str = ""


def local_inventory(root: str) -> dict[str, FileProperties]:
    """
    Returns {rel_posix: FileProperties} for every regular file under *root*.
    Directories are not recorded. Any inaccessible entry fails the walk.
    """
    def _raise(err: OSError):
        raise err

    result: dict[str, FileProperties] = {}
    try:
        if not stat.S_ISDIR(os.stat(root).st_mode):
            raise NotADirectoryError(f"{root} is not a directory")
        for dirpath, _, filenames in os.walk(root, onerror=_raise):
            for name in filenames:
                full = os.path.join(dirpath, name)
                st = os.stat(full)
                if not stat.S_ISREG(st.st_mode):
                    continue
                rel = to_posix(os.path.relpath(full, root))
                result[rel] = FileProperties(size=st.st_size, mod_time=st.st_mtime, name=name)
    except OSError as exc:
        raise WalkError(f"failed to walk local directory {root}: {exc}") from exc
    return result


def parse_listing(lines: list[str], root: str) -> dict[str, FileProperties]:
    """Parse `stat -c '%n:%s:%Y'` lines into {path relative to root: FileProperties}."""
    result: dict[str, FileProperties] = {}
    for line in lines:
        if not line:
            continue
        # split from the right: the path itself may contain ':'
        parts = line.rsplit(":", 2)
        if len(parts) != 3 or not parts[0]:
            raise ParseError(f"invalid line format: {line}")
        full_path, size_raw, mtime_raw = parts
        try:
            size = int(size_raw)
        except ValueError as exc:
            raise ParseError(f"failed to parse size for {full_path}: {exc}") from exc
        try:
            mtime = int(mtime_raw)
        except ValueError as exc:
            raise ParseError(f"failed to parse modification time for {full_path}: {exc}") from exc
        rel = posixpath.relpath(full_path, root)
        result[rel] = FileProperties(size=size, mod_time=float(mtime), name=posixpath.basename(full_path))
    return result


def remote_inventory(ctx: Context, run: RunFn, root: str) -> dict[str, FileProperties]:
    """
    Returns {rel_posix: FileProperties} for every file under remote *root*.

    A missing (or unreadable) remote directory is not an error: the result
    is empty and every local file counts as unmatched. Cancellation is not
    treated as absence and propagates.
    """
    quoted = shlex.quote(root)
    try:
        run(ctx, f"test -d {quoted}")
    except RemoteCommandError as exc:
        vlog(f"[scan] remote directory {root} not found ({exc}), treating as empty")
        return {}

    lines = run(ctx, f"find {quoted} -type f -exec stat -c '{_LISTING_FMT}' {{}} \\;")
    return parse_listing(lines, root)
