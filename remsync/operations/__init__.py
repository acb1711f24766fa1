"""Operations (run, scan, transfer)"""
from .runner import run_command, send_interrupt
from .scanner import FileProperties, local_inventory, remote_inventory, parse_listing
from .transfer import upload, download

__all__ = [
    "run_command", "send_interrupt",
    "FileProperties", "local_inventory", "remote_inventory", "parse_listing",
    "upload", "download",
]
