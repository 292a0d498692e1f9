"""Handler for 'ticketban events': tail board push events."""

import json
import logging
import signal
import sys
import threading

from ticketban.cli._common import error, load_context, require_login
from ticketban.events import is_board_event, subscribe_to_events

logger = logging.getLogger(__name__)


def events(args) -> int:
    """Print push events as JSON lines until interrupted."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    _config, session, client = load_context(args)
    require_login(session, args.json)

    if args.project:
        params = {"projectId": args.project}
    else:
        user = args.user or session.user_id
        if not user:
            error("Pass --project or --user (no signed-in user id stored).", args.json)
        params = {"userId": user}

    def on_event(event: dict) -> None:
        if args.all or is_board_event(event):
            print(json.dumps(event), flush=True)

    stop = threading.Event()
    unsubscribe = subscribe_to_events(client, params, on_event)
    logger.info("listening on %s", client.events_url(params))

    def _handle_signal(signum, frame):
        stop.set()

    signal.signal(signal.SIGTERM, _handle_signal)
    try:
        stop.wait()
    except KeyboardInterrupt:
        pass
    finally:
        unsubscribe()
    return 0
