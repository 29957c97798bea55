"""Exceptions raised by the URI format/parse builtins."""

from __future__ import annotations


class URIError(ValueError):
    """Base error for URI formatting and parsing failures."""


class OperandTypeError(URIError):
    """Raised when a builtin operand has the wrong top-level type."""

    def __init__(self, position: int, expected: str, actual: str):
        super().__init__(f"operand {position} must be {expected} but got {actual}")
        self.position = position
        self.expected = expected
        self.actual = actual


class URISyntaxError(URIError):
    """Raised when a URI string violates the URI grammar."""

    def __init__(self, uri: str, detail: str):
        super().__init__(f'parse "{uri}": {detail}')
        self.uri = uri
        self.detail = detail


class PortCoercionError(URIError):
    """Raised when a port cannot be read as an integer in range."""

    def __init__(self, value: str, reason: str = "not a decimal or hexadecimal integer"):
        super().__init__(f'invalid port "{value}": {reason}')
        self.value = value
        self.reason = reason


def policy_type_name(value: object) -> str:
    """Name a Python value by the policy-language type it represents."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, (set, frozenset)):
        return "set"
    return type(value).__name__
