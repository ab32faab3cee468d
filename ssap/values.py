from __future__ import annotations
from typing import Any, Dict, List, Optional

from ssap.message import TypeMismatchError

# ========================================
#           CHECKED JSON ACCESSORS
# ========================================
"""
Payloads arrive as plain decoded JSON (dict / list / str / int / float / bool / None).
These helpers narrow a value to the shape a caller needs and raise
TypeMismatchError instead of handing back a silent None.
"""


def _describe(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def expect_object(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeMismatchError(f"{where}: expected object, got {_describe(value)}")
    return value


def expect_array(value: Any, where: str) -> List[Any]:
    if not isinstance(value, list):
        raise TypeMismatchError(f"{where}: expected array, got {_describe(value)}")
    return value


def expect_string(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(f"{where}: expected string, got {_describe(value)}")
    return value


def optional_string(obj: Dict[str, Any], key: str, where: str) -> Optional[str]:
    """
    Returns obj[key] when it is a string, None when the key is missing or null.
    Any other type is a mismatch.
    """
    value = obj.get(key)
    if value is None:
        return None
    return expect_string(value, f"{where}.{key}")
