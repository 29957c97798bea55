"""Decompose URI strings into component records."""

from __future__ import annotations

from typing import Any
from urllib.parse import unquote

from uri_builtins.errors import OperandTypeError, policy_type_name
from uri_builtins.query import decode_query, encode_query
from uri_builtins.reference import check_port_range, split_uri


def parse_uri(uri: Any) -> dict[str, Any]:
    """
    Split a URI string into a component record.

    Opaque URIs (``mailto:user@example.org``) carry their scheme-specific part
    as ``path`` and no authority fields. Query and fragment keys appear only
    when their marker is present in the input, even if empty.

    Raises:
        OperandTypeError: when the operand is not a string.
        URISyntaxError: when the string is not a valid URI.
        PortCoercionError: when the port does not fit a 64-bit integer.
    """

    if not isinstance(uri, str):
        raise OperandTypeError(1, "string", policy_type_name(uri))

    reference = split_uri(uri)
    result: dict[str, Any] = {"scheme": reference.scheme}

    if reference.opaque:
        result["path"] = reference.opaque
    else:
        if reference.username is not None:
            result["username"] = reference.username
            if reference.password is not None:
                result["password"] = reference.password
        result["hostname"] = reference.hostname
        if reference.port:
            result["port"] = check_port_range(reference.port, int(reference.port))
        result["path"] = reference.path

    if reference.query is not None:
        query = decode_query(reference.query)
        result["query"] = query
        result["encoded_query"] = encode_query(query)

    if reference.fragment is not None:
        result["fragment"] = unquote(reference.fragment)

    return result
