"""Build canonical URI strings from component records."""

from __future__ import annotations

import re
from typing import Any

from uri_builtins.errors import PortCoercionError
from uri_builtins.query import encode_query
from uri_builtins.reference import (
    URIReference,
    check_port_range,
    compose_uri,
    escape_fragment,
    escape_path,
    split_uri,
)
from uri_builtins.validation import validate_component_record

_HEX_PORT = re.compile(r"([+-]?)0[xX]([0-9A-Fa-f]+)")
_DECIMAL_PORT = re.compile(r"[+-]?[0-9]+")


def coerce_port(port: int | float | str) -> int | float:
    """Resolve a port given as an integer, a number, or a decimal/hex string.

    Negative and fractional values are returned unchanged; the composed URI
    is rejected for them when it is re-split.
    """

    if isinstance(port, str):
        hex_match = _HEX_PORT.fullmatch(port)
        if hex_match:
            value = int(hex_match.group(2), 16)
            return check_port_range(port, -value if hex_match.group(1) == "-" else value)
        if _DECIMAL_PORT.fullmatch(port):
            return check_port_range(port, int(port))
        raise PortCoercionError(port)
    if isinstance(port, float) and port.is_integer():
        return check_port_range(str(port), int(port))
    if isinstance(port, int):
        return check_port_range(str(port), port)
    return port


def format_uri(payload: Any) -> str:
    """
    Build a URI string from a component record.

    Raises:
        OperandTypeError: when the payload is not an object.
        URISchemaError: when the record fails schema checks.
        PortCoercionError: when a port is not an integer or is out of range.
        URISyntaxError: when the composed URI is not valid.
    """

    components = validate_component_record(payload)
    record = components.record

    reference = URIReference(scheme=record.scheme)
    if components.has("encoded_query"):
        reference.query = record.encoded_query
    elif components.has("query"):
        reference.query = encode_query(record.query or {})

    if components.has("fragment") and record.fragment:
        reference.fragment = escape_fragment(record.fragment)

    if components.has("hostname"):
        if components.has("username"):
            reference.username = record.username
            if components.has("password"):
                reference.password = record.password

        host = record.hostname or ""
        if components.has("port") and record.port is not None:
            host = f"{host}:{coerce_port(record.port)}"
        reference.host = host
        reference.path = escape_path(record.path)
    else:
        reference.opaque = record.path

    # Splitting the draft again applies the grammar checks to the result.
    uri = compose_uri(split_uri(compose_uri(reference)))
    if components.has("fragment") and "#" not in uri:
        uri += "#"
    return uri
