"""Utilities (logging, file utilities)"""
from .logging import log, vlog, warn, set_verbose
from .file_utils import _file_changed, perm_string, touch_stamp, to_posix

__all__ = [
    "log", "vlog", "warn", "set_verbose",
    "_file_changed", "perm_string", "touch_stamp", "to_posix",
]
