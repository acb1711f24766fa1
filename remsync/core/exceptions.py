"""
Exception hierarchy for remote execution and sync.

Every error raised by remsync derives from RemoteError. Wrapping errors are
raised with ``raise Outer(...) from inner`` and carry the inner message, so
``str(exc)`` reads as a chain: "failed to create remote directory: canceled:
context canceled".
"""


class RemoteError(Exception):
    """Base exception class"""
    pass


class IdentityError(RemoteError):
    """Private key could not be read or parsed"""
    pass


class NotConnectedError(RemoteError):
    """Operation attempted before a successful connect"""

    def __init__(self, msg: str = "client is not connected"):
        super().__init__(msg)


# ── connection ───────────────────────────────────────────────────────────────

class DialError(RemoteError):
    """TCP dial failed, including deadline expiry"""
    pass


class HandshakeError(RemoteError):
    """SSH handshake or authentication failed"""
    pass


# ── command execution ────────────────────────────────────────────────────────

class SignalError(RemoteError):
    """Interrupt could not be delivered to the remote process"""
    pass


class CanceledError(RemoteError):
    """Operation aborted by the caller's context"""
    pass


class RemoteCommandError(RemoteError):
    """Remote process exited non-zero or could not be started"""
    pass


# ── transfer ─────────────────────────────────────────────────────────────────

class TransferError(RemoteError):
    """Base for single-file transfer errors"""
    pass


class CreateRemoteDirError(TransferError):
    pass


class CreateLocalDirError(TransferError):
    pass


class CopyError(TransferError):
    """The byte copy itself failed (includes cancellation mid-copy)"""
    pass


class SetModTimeError(TransferError):
    """Content was copied but the remote mtime could not be set"""
    pass


# ── inventory / sync ─────────────────────────────────────────────────────────

class WalkError(RemoteError):
    pass


class ParseError(RemoteError):
    pass


class SyncError(RemoteError):
    """Base for sync errors"""
    pass


class LocalInventoryError(SyncError):
    pass


class RemoteInventoryError(SyncError):
    pass


class UploadError(SyncError):
    """A file failed during sync; remaining uploads were skipped"""
    pass
