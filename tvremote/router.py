from __future__ import annotations
import json
from dataclasses import dataclass
from typing import Any, Optional

from ssap.log import get_logger
from ssap.message import Message, TypeMismatchError
from ssap.values import expect_array, expect_object, optional_string
from tvremote.commands import RESOLVE_APP_TAG, Dispatcher, PendingAction, is_query_tag
from tvremote.errors import ResolutionError

logger = get_logger(__name__)

REQUEST_ID_PREFIX = "req_"


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a run; the CLI turns it into output and an exit code."""
    exit_code: int = 0
    output: Optional[str] = None


@dataclass(frozen=True)
class Route:
    send: Optional[Message] = None
    outcome: Optional[Outcome] = None


def format_payload(payload: Any) -> str:
    return json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)


def resolve_app_id(payload: Any, name: str) -> str:
    """
    Find the app whose title or id equals name, ignoring case.
    The first match in list order wins.
    """
    try:
        apps = expect_array(expect_object(payload, "payload").get("apps"), "payload.apps")
        wanted = name.lower()
        for index, entry in enumerate(apps):
            where = f"payload.apps[{index}]"
            app = expect_object(entry, where)
            title = optional_string(app, "title", where)
            app_id = optional_string(app, "id", where)
            if (title is not None and title.lower() == wanted) or \
                    (app_id is not None and app_id.lower() == wanted):
                # A matching entry without an id still ends the search
                if app_id:
                    return app_id
                break
    except TypeMismatchError as e:
        raise ResolutionError(f"Could not parse app list for resolution: {e}")

    raise ResolutionError(f"Could not find app with name: {name}")


class ResponseRouter:
    """
    Correlates 'response' messages with the request this run sent and decides
    when the run is over.

    Owns the pending app action between the app-list request and its reply.
    """

    def __init__(self, dispatcher: Dispatcher, pending: Optional[PendingAction] = None) -> None:
        self.dispatcher = dispatcher
        self.pending = pending

    def route(self, message: Message) -> Route:
        msg_id = message.id or ""
        if not msg_id.startswith(REQUEST_ID_PREFIX):
            logger.debug("Ignoring response %r", msg_id)
            return Route()

        if msg_id == RESOLVE_APP_TAG:
            return Route(send=self._resolve(message))

        if is_query_tag(msg_id):
            return Route(outcome=Outcome(0, format_payload(message.payload)))

        logger.info(
            "Command %s request sent/acknowledged.",
            self.dispatcher.command,
            extra={"command": self.dispatcher.command, "msg_id": msg_id},
        )
        return Route(outcome=Outcome(0))

    def _resolve(self, message: Message) -> Message:
        pending, self.pending = self.pending, None
        if pending is None:
            raise ResolutionError("Received an app list but no app action is waiting for it")

        app_id = resolve_app_id(message.payload, pending.argument)
        logger.info("Resolved '%s' to ID: %s", pending.argument, app_id)
        return self.dispatcher.app_action(pending.command, app_id)
