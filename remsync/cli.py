#!/usr/bin/env python3
"""
remsync  —  Remote command execution and one-way file sync over SSH
===================================================================

Subcommands:
  run       Run a shell command on the remote host and print its output.
  upload    Copy a local file to the remote host.
  download  Copy a remote file to the local host.
  sync      Upload every local file that differs from the remote directory.

User and key default to $REMSYNC_USER and $REMSYNC_KEY.
Run 'remsync <subcommand> --help' for more details.
"""
import sys
import argparse
import signal
import threading


# ── shared ───────────────────────────────────────────────────────────────────

def _executer(args):
    from remsync.core.executer import Executer

    if not args.user or not args.key:
        print("error: --user and --key are required (or set REMSYNC_USER / REMSYNC_KEY)",
              file=sys.stderr)
        sys.exit(2)
    return Executer(args.user, args.key)


def _run_cancellable(args, action):
    """
    Connect, run *action(ex, ctx)* and close. Ctrl-C cancels the context so
    a running remote command gets interrupted instead of orphaned.
    """
    from remsync import config as _cfg
    from remsync.core.context import Context
    from remsync.core.exceptions import RemoteError
    from remsync.utils.logging import set_verbose, warn

    set_verbose(args.verbose)
    _cfg.apply_profile({k: v for k, v in (("port", args.port),
                                          ("connect_timeout", args.connect_timeout))
                        if v is not None})
    ctx = Context(timeout=args.timeout) if args.timeout else Context()
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGINT, lambda *_: ctx.cancel())

    try:
        with _executer(args) as ex:
            ex.connect(ctx, args.host)
            return action(ex, ctx)
    except RemoteError as exc:
        if ctx.done():
            warn("Interrupted.")
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


# ── subcommands ──────────────────────────────────────────────────────────────

def remote_command(args) -> str:
    """Join the CMD words, dropping a leading "--" separator."""
    words = args.command
    if words and words[0] == "--":
        words = words[1:]
    return " ".join(words)


def cmd_run(args):
    """Run a command and print the captured stdout lines."""
    command = remote_command(args)
    # remote stdout is already mirrored live
    lines = _run_cancellable(args, lambda ex, ctx: ex.run(ctx, command))
    if args.print_lines:
        for line in lines:
            print(line)


def cmd_upload(args):
    _run_cancellable(args, lambda ex, ctx: ex.upload(ctx, args.local, args.remote, args.mkdir))


def cmd_download(args):
    _run_cancellable(args, lambda ex, ctx: ex.download(ctx, args.remote, args.local, args.mkdir))


def cmd_sync(args):
    """Sync and print each uploaded relative path."""
    synced = _run_cancellable(args, lambda ex, ctx: ex.sync(ctx, args.local_dir, args.remote_dir))
    for rel in synced:
        print(rel)
    print(f"{len(synced)} file(s) synced", file=sys.stderr)


# ── parser ───────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    from remsync import config as _cfg

    env = _cfg.env_profile()

    parser = argparse.ArgumentParser(
        prog="remsync",
        description="Remote command execution and one-way file sync over SSH",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-u", "--user", metavar="NAME", default=env.get("user"),
                        help="SSH user (default: $REMSYNC_USER)")
    common.add_argument("-k", "--key", metavar="PATH", default=env.get("ssh_key"),
                        help="Private key file (default: $REMSYNC_KEY)")
    common.add_argument("-t", "--timeout", type=float, default=None, metavar="SECONDS",
                        help="Deadline for the whole operation")
    common.add_argument("-p", "--port", type=int, default=None, metavar="N",
                        help="Port used when HOST has none (default: 22)")
    common.add_argument("--connect-timeout", type=float, default=None, metavar="SECONDS",
                        help="Dial timeout when no --timeout is given (default: 30)")
    common.add_argument("-v", "--verbose", action="store_true",
                        help="Show debug output")

    subparsers = parser.add_subparsers(dest="command_name")

    # run HOST CMD...
    run_p = subparsers.add_parser("run", parents=[common],
                                  help="Run a shell command on the remote host",
                                  usage="%(prog)s [options] HOST [--] CMD...")
    run_p.add_argument("host", metavar="HOST", help="host[:port]")
    run_p.add_argument("--print-lines", action="store_true",
                       help="Print the captured non-empty lines after the command exits")
    run_p.add_argument("command", nargs=argparse.REMAINDER, metavar="CMD",
                       help="Command line to execute. Everything after HOST goes to the "
                            "remote shell, so put options before HOST "
                            "(e.g. remsync run -v HOST -- ls -la)")

    # upload HOST LOCAL REMOTE
    up_p = subparsers.add_parser("upload", parents=[common],
                                 help="Copy a local file to the remote host")
    up_p.add_argument("host", metavar="HOST", help="host[:port]")
    up_p.add_argument("local", metavar="LOCAL")
    up_p.add_argument("remote", metavar="REMOTE")
    up_p.add_argument("--mkdir", action="store_true",
                      help="Create the remote parent directory first")

    # download HOST REMOTE LOCAL
    down_p = subparsers.add_parser("download", parents=[common],
                                   help="Copy a remote file to the local host")
    down_p.add_argument("host", metavar="HOST", help="host[:port]")
    down_p.add_argument("remote", metavar="REMOTE")
    down_p.add_argument("local", metavar="LOCAL")
    down_p.add_argument("--mkdir", action="store_true",
                        help="Create the local parent directory first")

    # sync HOST LOCAL_DIR REMOTE_DIR
    sync_p = subparsers.add_parser("sync", parents=[common],
                                   help="Upload local files that differ from the remote directory")
    sync_p.add_argument("host", metavar="HOST", help="host[:port]")
    sync_p.add_argument("local_dir", metavar="LOCAL_DIR")
    sync_p.add_argument("remote_dir", metavar="REMOTE_DIR")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command_name == "run":
        if not remote_command(args):
            parser.error("run: a command is required")
        cmd_run(args)
    elif args.command_name == "upload":
        cmd_upload(args)
    elif args.command_name == "download":
        cmd_download(args)
    elif args.command_name == "sync":
        cmd_sync(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
