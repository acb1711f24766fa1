"""
Remote command execution with cooperative cancellation
"""
import sys
import threading

import paramiko
from paramiko.common import cMSG_CHANNEL_REQUEST

from .. import config as _cfg
from ..core.context import Context
from ..core.exceptions import CanceledError, RemoteCommandError, SignalError
from ..utils.logging import vlog


def send_interrupt(chan: paramiko.Channel, signal_name: str = "INT"):
    """
    Send an RFC 4254 "signal" channel request to the remote process.
    paramiko has no public call for this, so the request is built by hand.
    """
    if chan.closed:
        raise paramiko.SSHException("channel is closed")
    m = paramiko.Message()
    m.add_byte(cMSG_CHANNEL_REQUEST)
    m.add_int(chan.remote_chanid)
    m.add_string("signal")
    m.add_boolean(False)
    m.add_string(signal_name)
    chan.transport._send_user_message(m)


def _drain(stream, sink, capture=None):
    for line in iter(stream.readline, b""):
        if capture is not None:
            capture.extend(line)
        sink.write(line.decode("utf-8", errors="replace"))
        sink.flush()


def _collect(chan, out: bytearray, result: dict, done: threading.Event):
    """Worker: stream stdout (captured + mirrored) and stderr, then read exit status."""
    try:
        err_thread = threading.Thread(target=_drain, args=(chan.makefile_stderr("rb"), sys.stderr),
                                      daemon=True)
        err_thread.start()
        _drain(chan.makefile("rb"), sys.stdout, out)
        result["status"] = chan.recv_exit_status()
        err_thread.join()
    except (paramiko.SSHException, OSError, EOFError) as exc:
        result["error"] = exc
    finally:
        done.set()


def run_command(ctx: Context, client: paramiko.SSHClient, command: str) -> list[str]:
    """
    Run *command* on the remote host and return its non-empty stdout lines.

    The command runs on a worker thread while this thread watches *ctx*.
    Whichever finishes first decides the outcome: on cancellation an
    interrupt is sent, the channel is closed and CanceledError is raised,
    even if the command would have succeeded a moment later.
    """
    vlog(f"[run] {command}")
    transport = client.get_transport()
    if transport is None or not transport.is_active():
        raise RemoteCommandError("failed to create session: transport is not active")
    try:
        chan = transport.open_session()
    except (paramiko.SSHException, OSError, EOFError) as exc:
        raise RemoteCommandError(f"failed to create session: {exc}") from exc

    out = bytearray()
    result: dict = {}
    done = threading.Event()
    try:
        try:
            chan.exec_command(command)
        except (paramiko.SSHException, OSError, EOFError) as exc:
            raise RemoteCommandError(f"failed to run command on remote server: {exc}") from exc

        threading.Thread(target=_collect, args=(chan, out, result, done), daemon=True).start()

        while True:
            cause = ctx.err()
            if cause is not None:
                try:
                    send_interrupt(chan)
                except (paramiko.SSHException, OSError, EOFError) as exc:
                    raise SignalError(
                        f"failed to send interrupt signal to remote process: {exc}") from exc
                raise CanceledError(f"canceled: {cause}") from cause
            if done.wait(_cfg.POLL_INTERVAL):
                break
    finally:
        chan.close()

    if "error" in result:
        exc = result["error"]
        raise RemoteCommandError(f"failed to run command on remote server: {exc}") from exc
    status = result.get("status", -1)
    if status != 0:
        raise RemoteCommandError(
            f"failed to run command on remote server: Process exited with status {status}")

    return [line for line in out.decode("utf-8", errors="replace").split("\n") if line != ""]
