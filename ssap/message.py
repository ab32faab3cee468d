
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional
import json

from ssap.types import MessageType


class MessageError(Exception):
    """Base class for SSAP framing problems."""
    pass
class MalformedMessageError(MessageError):
    """Raised when an inbound frame is not a usable SSAP message."""
    pass
class TypeMismatchError(MessageError):
    """Raised when a decoded JSON value does not have the expected shape."""
    pass


@dataclass
class Message:
    """
    A single SSAP frame:
    {
    "type":    "register | request | registered | response | error",
    "id":      "STRING (correlation id, echoed by the TV)",
    "uri":     "ssap://... (requests only)",
    "payload": { ... },
    "error":   "STRING (error messages only)"
    }

    Absent fields are kept as None and left out of the JSON.
    """
    type: str                      # Message type, lower case on the wire
    id: Optional[str] = None       # Correlation id
    uri: Optional[str] = None      # Target endpoint for requests
    payload: Any = None            # Endpoint-specific JSON value
    error: Optional[str] = None    # Error text from the TV

    @classmethod
    def from_json(cls, json_str: str) -> 'Message':
        """Parse JSON string into Message, validating structure"""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise MalformedMessageError(f"Invalid JSON: {e}")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> 'Message':
        """Create Message from a decoded JSON object, validating field types"""
        if not isinstance(data, dict):
            raise MalformedMessageError("Message must be a JSON object")
        if not isinstance(data.get('type'), str):
            raise MalformedMessageError("'type' must be a string")

        # A non-text id or uri cannot correlate with anything we sent, but the
        # frame's type still has to be acted on
        msg_id = data.get('id')
        if not isinstance(msg_id, str):
            msg_id = None
        uri = data.get('uri')
        if not isinstance(uri, str):
            uri = None

        # The TV reports errors as text; anything else is kept as its JSON form
        error = data.get('error')
        if error is not None and not isinstance(error, str):
            error = json.dumps(error)

        return cls(
            type=data['type'],
            id=msg_id,
            uri=uri,
            payload=data.get('payload'),
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Message back to dictionary"""
        result: Dict[str, Any] = {'type': self.type}
        if self.id is not None:
            result['id'] = self.id
        if self.uri is not None:
            result['uri'] = self.uri
        if self.payload is not None:
            result['payload'] = self.payload
        if self.error is not None:
            result['error'] = self.error
        return result

    def to_json(self) -> str:
        """Convert Message to JSON string"""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    def is_type(self, msg_type: MessageType) -> bool:
        return self.type == msg_type.value


def create_request(uri: str, msg_id: str, payload: Any = None) -> Message:
    """Helper to build an outbound request"""
    return Message(
        type=MessageType.REQUEST.value,
        id=msg_id,
        uri=uri,
        payload=payload,
    )
