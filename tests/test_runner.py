"""
Tests for remote command execution: output capture, exit status handling
and cancellation precedence.
"""
import threading
import time
import unittest

import paramiko

from fakes import FakeChannel, FakeClient, FakeTransport
from remsync import config as _cfg
from remsync.core.context import Context, ContextCanceled
from remsync.core.exceptions import CanceledError, RemoteCommandError, SignalError
from remsync.operations.runner import run_command


def _client(*channels, **kw):
    transport = FakeTransport(*channels, **kw)
    return FakeClient(transport), transport


class TestRunCommand(unittest.TestCase):

    def setUp(self):
        self._poll = _cfg.POLL_INTERVAL
        _cfg.POLL_INTERVAL = 0.01

    def tearDown(self):
        _cfg.POLL_INTERVAL = self._poll

    def test_single_line(self):
        """stdout is returned as a list of lines."""
        chan = FakeChannel(stdout=b"hello world\n")
        client, _ = _client(chan)
        out = run_command(Context(), client, "sh -c 'echo hello world'")
        self.assertEqual(out, ["hello world"])
        self.assertEqual(chan.commands, ["sh -c 'echo hello world'"])
        self.assertTrue(chan.closed)

    def test_blank_lines_dropped(self):
        """Empty lines, embedded or trailing, are not part of the result."""
        chan = FakeChannel(stdout=b"a\n\nb\n\n\nc\n\n")
        client, _ = _client(chan)
        self.assertEqual(run_command(Context(), client, "cmd"), ["a", "b", "c"])

    def test_stderr_not_captured(self):
        chan = FakeChannel(stdout=b"out\n", stderr=b"err\n")
        client, _ = _client(chan)
        self.assertEqual(run_command(Context(), client, "cmd"), ["out"])

    def test_non_zero_exit(self):
        """A non-zero exit status is a RemoteCommandError."""
        chan = FakeChannel(status=1)
        client, _ = _client(chan)
        with self.assertRaises(RemoteCommandError) as cm:
            run_command(Context(), client, "false")
        self.assertEqual(str(cm.exception),
                         "failed to run command on remote server: Process exited with status 1")

    def test_exec_failure(self):
        chan = FakeChannel(exec_error=paramiko.SSHException("Channel closed."))
        client, _ = _client(chan)
        with self.assertRaises(RemoteCommandError):
            run_command(Context(), client, "cmd")
        self.assertTrue(chan.closed)

    def test_inactive_transport(self):
        client, _ = _client(active=False)
        with self.assertRaises(RemoteCommandError):
            run_command(Context(), client, "cmd")

    def test_completed_before_cancel(self):
        """A command that finishes while the context is live succeeds."""
        chan = FakeChannel(stdout=b"done\n")
        client, transport = _client(chan)
        self.assertEqual(run_command(Context(), client, "cmd"), ["done"])
        self.assertEqual(transport.messages, [])


class TestRunCommandCancel(unittest.TestCase):

    def setUp(self):
        self._poll = _cfg.POLL_INTERVAL
        _cfg.POLL_INTERVAL = 0.01

    def tearDown(self):
        _cfg.POLL_INTERVAL = self._poll

    def test_cancel_before_start(self):
        """An already-cancelled context yields CanceledError and an interrupt."""
        ctx = Context()
        ctx.cancel()
        chan = FakeChannel(stdout=b"would succeed\n", block=True)
        client, transport = _client(chan)
        with self.assertRaises(CanceledError) as cm:
            run_command(ctx, client, "sleep 10")
        self.assertEqual(str(cm.exception), "canceled: context canceled")
        self.assertIsInstance(cm.exception.__cause__, ContextCanceled)
        self.assertEqual(len(transport.messages), 1)
        self.assertTrue(chan.closed)

    def test_cancel_while_running(self):
        """Cancelling mid-command returns promptly, never a success."""
        ctx = Context()
        chan = FakeChannel(stdout=b"late\n", block=True)
        client, transport = _client(chan)
        threading.Timer(0.05, ctx.cancel).start()
        started = time.monotonic()
        with self.assertRaises(CanceledError):
            run_command(ctx, client, "sleep 10")
        self.assertLess(time.monotonic() - started, 2)
        self.assertEqual(len(transport.messages), 1)

    def test_interrupt_is_signal_request(self):
        ctx = Context()
        ctx.cancel()
        client, transport = _client(FakeChannel(block=True))
        with self.assertRaises(CanceledError):
            run_command(ctx, client, "sleep 10")
        m = paramiko.Message(transport.messages[0].asbytes())
        m.get_byte()
        self.assertEqual(m.get_int(), FakeChannel.remote_chanid)
        self.assertEqual(m.get_text(), "signal")
        self.assertFalse(m.get_boolean())
        self.assertEqual(m.get_text(), "INT")

    def test_deadline(self):
        ctx = Context.with_timeout(0.05)
        client, _ = _client(FakeChannel(block=True))
        with self.assertRaises(CanceledError) as cm:
            run_command(ctx, client, "sleep 10")
        self.assertEqual(str(cm.exception), "canceled: context deadline exceeded")

    def test_signal_failure(self):
        """Failing to deliver the interrupt is reported as SignalError."""
        ctx = Context()
        ctx.cancel()
        client, _ = _client(FakeChannel(block=True), signal_error=EOFError("socket closed"))
        with self.assertRaises(SignalError) as cm:
            run_command(ctx, client, "sleep 10")
        self.assertIn("failed to send interrupt signal", str(cm.exception))


if __name__ == "__main__":
    unittest.main()
