"""Core functionality"""
from .context import Context, ContextCanceled, DeadlineExceeded
from .ssh_manager import SSHManager, split_host_port
from .sync_engine import run_sync, find_unmatched
from .executer import Executer, new_executers

__all__ = [
    "Context", "ContextCanceled", "DeadlineExceeded",
    "SSHManager", "split_host_port",
    "run_sync", "find_unmatched",
    "Executer", "new_executers",
]
