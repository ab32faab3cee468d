from __future__ import annotations
import json
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from ssap.log import get_logger
from ssap.message import Message, create_request
from ssap.utils import is_app_id
from tvremote.errors import InvalidPayloadError, MissingArgumentError, UnknownCommandError

logger = get_logger(__name__)


PayloadBuilder = Callable[[str], Any]

INITIALIZE_KEY = "initialize-key"

LIST_APPS_URI = "ssap://com.webos.applicationManager/listApps"
RESOLVE_APP_TAG = "req_resolve_app"

# Responses to these tags carry data worth printing
QUERY_TAGS = {"req_info", "req_list_apps", "req_list_inputs"}

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def _no_payload(argument: str) -> Any:
    return None


def _fixed(payload: Dict[str, Any]) -> PayloadBuilder:
    def build(argument: str) -> Any:
        return dict(payload)
    return build


def _required(key: str, label: str) -> PayloadBuilder:
    def build(argument: str) -> Any:
        if argument == "":
            raise MissingArgumentError(f"{label} argument required")
        return {key: argument}
    return build


def parse_volume(argument: str) -> int:
    """Decimal integer with optional sign; anything else counts as 0."""
    if _INTEGER_RE.fullmatch(argument):
        return int(argument)
    logger.debug("Volume argument %r is not an integer, using 0", argument)
    return 0


def _volume(argument: str) -> Any:
    return {"volume": parse_volume(argument)}


@dataclass(frozen=True)
class Command:
    name: str
    uri: str
    tag: str
    build: PayloadBuilder = _no_payload
    example: str = ""

    def request(self, argument: str = "") -> Message:
        return create_request(self.uri, self.tag, self.build(argument))


def is_query_tag(tag: str) -> bool:
    return tag.endswith("_get") or tag in QUERY_TAGS


# ========================================
#           COMMAND CATALOGUE
# ========================================

_SIMPLE_COMMANDS: Tuple[Command, ...] = (
    Command("info", "ssap://system/getSystemInfo", "req_info"),
    Command("list-apps", LIST_APPS_URI, "req_list_apps"),
    Command("vol-get", "ssap://audio/getVolume", "req_vol_get"),
    Command("vol-set", "ssap://audio/setVolume", "req_vol_set", _volume, "--arg 20"),
    Command("vol-up", "ssap://audio/volumeUp", "req_vol_up"),
    Command("vol-down", "ssap://audio/volumeDown", "req_vol_down"),
    Command("mute", "ssap://audio/setMute", "req_mute", _fixed({"mute": True})),
    Command("un-mute", "ssap://audio/setMute", "req_unmute", _fixed({"mute": False})),
    Command("chan-get", "ssap://tv/getCurrentChannel", "req_chan_get"),
    Command("chan-up", "ssap://tv/channelUp", "req_chan_up"),
    Command("chan-down", "ssap://tv/channelDown", "req_chan_down"),
    Command("toast", "ssap://system.notifications/createToast", "req_toast",
            _required("message", "Toast message"), '--arg "Hello World"'),
    Command("turn-off", "ssap://system/turnOff", "req_turn_off"),
    Command("list-inputs", "ssap://tv/getExternalInputList", "req_list_inputs"),
    Command("set-input", "ssap://tv/switchInput", "req_set_input",
            _required("inputId", "Input ID"), "--arg HDMI_1"),
    Command("play", "ssap://media.controls/play", "req_play"),
    Command("pause", "ssap://media.controls/pause", "req_pause"),
    Command("stop", "ssap://media.controls/stop", "req_stop"),
    Command("rewind", "ssap://media.controls/rewind", "req_rewind"),
    Command("fast-forward", "ssap://media.controls/fastForward", "req_fast_forward"),
)

# Commands that target an app; the payload is built from the resolved app id
APP_COMMANDS: Dict[str, Command] = {
    "launch": Command("launch", "ssap://system.launcher/launch", "req_launch",
                      example="--arg youtube [--payload '{\"contentId\":\"...\"}']"),
    "close": Command("close", "ssap://system.launcher/close", "req_close", example="--arg youtube"),
}

COMMANDS: Dict[str, Command] = {c.name: c for c in _SIMPLE_COMMANDS}

COMMAND_NAMES: Tuple[str, ...] = (
    INITIALIZE_KEY, "info", "list-apps", "launch", "close",
    "vol-get", "vol-set", "vol-up", "vol-down", "mute", "un-mute",
    "chan-get", "chan-up", "chan-down", "toast", "turn-off",
    "list-inputs", "set-input", "play", "pause", "stop", "rewind", "fast-forward",
)


def lookup(name: str) -> Optional[Command]:
    return COMMANDS.get(name) or APP_COMMANDS.get(name)


def parse_launch_params(text: str) -> Optional[Dict[str, Any]]:
    """--payload for launch: empty means none, otherwise it must be a JSON object."""
    if text == "":
        return None
    try:
        params = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidPayloadError(f"Invalid JSON payload: {e}")
    if not isinstance(params, dict):
        raise InvalidPayloadError("Invalid JSON payload: expected a JSON object")
    return params


# ========================================
#           DISPATCHER
# ========================================

@dataclass(frozen=True)
class PendingAction:
    """An app action waiting for its app name to be resolved."""
    command: str
    argument: str


@dataclass(frozen=True)
class Dispatch:
    request: Optional[Message] = None
    pending: Optional[PendingAction] = None


class Dispatcher:
    """
    Turns the (command, argument) picked on the command line into SSAP requests.

    The first dispatch is planned on construction, so unknown commands,
    missing arguments and bad --payload values fail before any connection
    is opened.
    """

    def __init__(self, command: str, argument: str = "", launch_params: str = "") -> None:
        self.command = command
        self.argument = argument
        self.params = parse_launch_params(launch_params) if command == "launch" else None
        self._initial = self._plan()

    @property
    def initialize_key(self) -> bool:
        return self.command == INITIALIZE_KEY

    def initial(self) -> Dispatch:
        """What to send once registration completes."""
        return self._initial

    def _plan(self) -> Dispatch:
        if self.initialize_key:
            return Dispatch()

        if self.command in APP_COMMANDS:
            if self.argument != "" and not is_app_id(self.argument):
                pending = PendingAction(self.command, self.argument)
                return Dispatch(create_request(LIST_APPS_URI, RESOLVE_APP_TAG), pending)
            return Dispatch(self.app_action(self.command, self.argument))

        command = COMMANDS.get(self.command)
        if command is None:
            raise UnknownCommandError(f"Unknown command: {self.command}")
        return Dispatch(command.request(self.argument))

    def app_action(self, command: str, app_id: str) -> Message:
        target = APP_COMMANDS.get(command)
        if target is None:
            raise UnknownCommandError(f"Unknown app command: {command}")

        payload: Dict[str, Any] = {"id": app_id}
        if command == "launch" and self.params is not None:
            payload["params"] = self.params
        return create_request(target.uri, target.tag, payload)
