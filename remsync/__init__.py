"""remsync - remote command execution and one-way file sync over ssh"""
from .core import Context, Executer, new_executers
from .core.exceptions import RemoteError

__all__ = ["Context", "Executer", "new_executers", "RemoteError"]
