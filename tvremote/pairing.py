"""
Pairing handshake for webOS SSAP.

The first register on a new client makes the TV show a PROMPT; once the user
accepts, the TV answers with a 'registered' message carrying a client-key.
Presenting that key on later runs skips the prompt.
"""

from __future__ import annotations
from typing import Optional, Tuple

from ssap.message import Message
from ssap.types import MessageType

REGISTER_ID = "register_0"

# Every scope needed by the command catalogue, requested once at pairing
PERMISSIONS: Tuple[str, ...] = (
    "READ_UPDATE_INFO",
    "READ_NETWORK_STATE",
    "READ_RUNNING_APPS",
    "READ_INSTALLED_APPS",
    "CONTROL_AUDIO",
    "CONTROL_INPUT_TEXT",
    "CONTROL_MOUSE",
    "CONTROL_POWER",
    "CONTROL_TV",
    "READ_APP_STATUS",
    "READ_CURRENT_CHANNEL",
    "READ_INPUT_DEVICE_LIST",
    "READ_TV_CHANNEL_LIST",
    "READ_VOLUME",
    "WRITE_NOTIFICATION_TOAST",
    "LAUNCH",
    "CONTROL_APP",
    "WEBAPP_LAUNCHER",
    "CONTROL_INPUT_MEDIA_PLAYBACK",
    "CHECK_BLUETOOTH_DEVICE",
    "CONTROL_BLUETOOTH",
    "READ_SETTINGS",
    "CONTROL_DISPLAY",
    "READ_LGE_SDX",
    "READ_NOTIFICATIONS",
    "WRITE_SETTINGS",
    "TEST_SECURE",
    "CONTROL_MOUSE_AND_KEYBOARD",
)


def build_register(client_key: str) -> Message:
    """An empty client_key asks the TV to pair from scratch."""
    return Message(
        type=MessageType.REGISTER.value,
        id=REGISTER_ID,
        payload={
            "forcePairing": False,
            "pairingType": "PROMPT",
            "client-key": client_key,
            "manifest": {
                "manifestVersion": 1,
                "appVersion": "1.1",
                "permissions": list(PERMISSIONS),
            },
        },
    )


def rotated_key(message: Message, current: str) -> Optional[str]:
    """The client-key offered in a 'registered' message, if it differs from ours."""
    if not isinstance(message.payload, dict):
        return None
    offered = message.payload.get("client-key")
    if isinstance(offered, str) and offered != current:
        return offered
    return None


def is_pairing_prompt(message: Message) -> bool:
    """The TV acknowledges an unpaired register with a PROMPT response first."""
    return (
        message.is_type(MessageType.RESPONSE)
        and message.id == REGISTER_ID
        and isinstance(message.payload, dict)
        and message.payload.get("pairingType") == "PROMPT"
    )
