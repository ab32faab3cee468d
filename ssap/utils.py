from __future__ import annotations

DEFAULT_SSAP_PORT = 3000

# ========================================
#           ADDRESS HELPERS
# ========================================
"""
Helpers the CLI uses to turn a user supplied TV address
into the WebSocket URL the session dials.
"""


def is_hostport(s: str) -> bool:
    """
    Accepts 'hostname:port' or 'A.B.C.D:port'.

    Validates that:
    - String contains a colon
    - Port is a valid integer between 1 and 65535
    - Hostname is non-empty

    Examples: "localhost:3000", "192.168.1.5:3000", "lgwebostv:3001"
    """
    try:
        if ':' not in s:
            return False
        host, port_s = s.rsplit(':', 1)  # rsplit to handle IPv6 future-proofing
        if not host:  # Empty hostname
            return False
        port = int(port_s)
        return 0 < port <= 65535
    except ValueError:
        return False


def normalize_addr(addr: str, default_port: int = DEFAULT_SSAP_PORT) -> str:
    """
    Returns 'host:port', appending the SSAP port when only a host is given.
    Raises ValueError for anything else.
    """
    addr = addr.strip()
    if addr and ':' not in addr:
        addr = f"{addr}:{default_port}"
    if not is_hostport(addr):
        raise ValueError(f"Invalid TV address: {addr!r} (expected host:port)")
    return addr


def ws_url(addr: str) -> str:
    return f"ws://{normalize_addr(addr)}/"


def is_app_id(s: str) -> bool:
    """webOS app ids are reverse-DNS style, e.g. 'com.webos.app.hdmi1'."""
    return "." in s
