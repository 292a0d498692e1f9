"""Handlers for 'ticketban login' and 'ticketban logout'."""

import getpass
import logging

from ticketban.api import ApiError
from ticketban.cli._common import error, load_context, output_result
from ticketban.config import save_config

logger = logging.getLogger(__name__)


def login(args) -> int:
    """Sign in and store the token in the config file."""
    config, session, client = load_context(args)
    password = args.password or getpass.getpass("Password: ")
    try:
        session.login(client, args.email, password)
    except ApiError as e:
        error(str(e), args.json)
    session.apply(config)
    path = save_config(config)
    name = session.user.get("name") or session.user.get("email") or args.email
    output_result(
        {"user": session.user, "role": session.role, "config": str(path)},
        f"Signed in as {name} ({session.role or 'no role'})",
        args.json,
    )
    return 0


def logout(args) -> int:
    """Drop the stored token. The server is told too when reachable."""
    config, session, client = load_context(args)
    if session.authenticated:
        try:
            client.logout()
        except ApiError as e:
            logger.warning("server logout failed: %s", e)
    session.logout(client)
    session.apply(config)
    save_config(config)
    output_result({"signed_out": True}, "Signed out", args.json)
    return 0
