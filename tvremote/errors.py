from __future__ import annotations


class RemoteError(Exception):
    """Base for every condition that ends a tvremote run with a failure."""
    exit_code = 1


class ValidationError(RemoteError):
    """Rejected before anything is sent to the TV."""
    pass
class UnknownCommandError(ValidationError):
    """Raised when the requested command is not in the catalogue."""
    pass
class MissingArgumentError(ValidationError):
    """Raised when a command that needs --arg got an empty one."""
    pass
class InvalidPayloadError(ValidationError):
    """Raised when --payload is not a JSON object."""
    pass


class ConfigError(RemoteError):
    """Bad address or unreadable config file."""
    pass


class TransportError(RemoteError):
    """Connect refused, proxy unreachable, send failed or socket closed early."""
    pass


class DeviceError(RemoteError):
    """The TV answered with an error message."""

    def __init__(self, error: str, payload=None) -> None:
        detail = error or "unspecified error"
        if payload:
            detail = f"{detail} (payload: {payload})"
        super().__init__(detail)
        self.error = error
        self.payload = payload


class ResolutionError(RemoteError):
    """An app name could not be turned into an app id."""
    pass
