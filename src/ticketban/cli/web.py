"""Handlers for 'ticketban web' command."""

import shlex
import shutil
import sys

from textual_serve.server import Server


def web(args) -> int:
    ticketban = shutil.which("ticketban")
    if ticketban is None:
        print("error: ticketban not found on PATH", file=sys.stderr)
        return 1

    parts = [ticketban]
    if args.api:
        parts += ["--api", args.api]
    if args.role:
        parts += ["--role", args.role]
    if args.project:
        parts += ["--project", args.project]
    if args.developer:
        parts += ["--developer", args.developer]
    command = shlex.join(parts)

    server = Server(command, host=args.host, port=args.port, title="ticketban")

    print(f"serving ticketban at http://{args.host}:{args.port}")
    server.serve()
    return 0
