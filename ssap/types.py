from __future__ import annotations

from enum import Enum
from typing import Set


class MessageType(str, Enum):
    """SSAP message types seen on the wire."""

    # Client to TV
    REGISTER = "register"        # Pairing handshake
    REQUEST = "request"          # Command addressed to an ssap:// endpoint

    # TV to client
    REGISTERED = "registered"    # Handshake accepted, may carry a new client-key
    RESPONSE = "response"        # Reply correlated by id
    ERROR = "error"              # Failed registration or failed request

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if string is a valid message type."""
        try:
            cls(value)
            return True
        except ValueError:
            return False


# Message types this client reacts to
INBOUND_MESSAGES: Set[MessageType] = {
    MessageType.REGISTERED,
    MessageType.RESPONSE,
    MessageType.ERROR,
}
