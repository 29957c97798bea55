"""Syntactic URI references: splitting strings into parts and composing them back.

The splitter follows the generic URI grammar of RFC 3986 with the same
strictness rules as the platform URL libraries policy engines commonly embed:
ports must be all digits, userinfo is restricted to its RFC character set,
percent escapes must be well formed and a scheme-less reference may not carry
a colon in its first path segment.

Every optional part keeps explicit presence (``None`` means absent), so an
empty query or fragment marker survives a split/compose round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote

from uri_builtins.errors import PortCoercionError, URISyntaxError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_SCHEME = re.compile(r"([A-Za-z][A-Za-z0-9+.\-]*):")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2}).{0,2}", re.DOTALL)
_ASCII_ESCAPE = re.compile(r"%[0-7][0-9A-Fa-f]")
_OPTIONAL_PORT = re.compile(r"(?::[0-9]*)?")
_USERINFO = re.compile(r"[A-Za-z0-9\-._:~!$&'()*+,;=%@]*")
_INVALID_HOST_CHAR = re.compile(r"[^A-Za-z0-9\-._~!$&'()*+,;=:\[\]<>\"%\x80-\U0010ffff]")
_VALID_ENCODED_PATH = re.compile(r"(?:[A-Za-z0-9\-._~!$&'()*+,;=:@\[\]/]|%[0-9A-Fa-f]{2})*")
_VALID_ENCODED_FRAGMENT = re.compile(r"(?:[A-Za-z0-9\-._~!$&'()*+,;=:@\[\]/?]|%[0-9A-Fa-f]{2})*")

_PATH_SAFE = "/$&+,:;=@"
_FRAGMENT_SAFE = "$&+,/:;=?@!()*"
_USERINFO_SAFE = "$&+,;="
_HOST_SAFE = "!$&'()*+,;=:[]<>\""

# Largest port accepted, the range of a signed 64-bit integer.
MAX_PORT_NUMBER = 2**63 - 1


@dataclass(slots=True)
class URIReference:
    """Wire-level parts of a URI.

    ``path``, ``opaque``, ``query`` and ``fragment`` hold escaped text as it
    appears in the URI; ``host``, ``username`` and ``password`` hold decoded
    text. ``host`` is ``None`` when the reference has no authority and
    includes the ``:port`` suffix when one is present.
    """

    scheme: str = ""
    opaque: str = ""
    username: str | None = None
    password: str | None = None
    host: str | None = None
    path: str = ""
    query: str | None = None
    fragment: str | None = None

    @property
    def hostname(self) -> str:
        host, _ = _split_host_port(self.host or "")
        if host.startswith("[") and host.endswith("]"):
            return host[1:-1]
        return host

    @property
    def port(self) -> str:
        _, port = _split_host_port(self.host or "")
        return port


def _split_host_port(host: str) -> tuple[str, str]:
    colon = host.rfind(":")
    if colon != -1 and _OPTIONAL_PORT.fullmatch(host[colon:]):
        return host[:colon], host[colon + 1 :]
    return host, ""


def check_port_range(text: str, port: int) -> int:
    if not -MAX_PORT_NUMBER - 1 <= port <= MAX_PORT_NUMBER:
        raise PortCoercionError(text, "value out of range")
    return port


def escape_path(path: str) -> str:
    return quote(path, safe=_PATH_SAFE)


def escape_fragment(fragment: str) -> str:
    return quote(fragment, safe=_FRAGMENT_SAFE)


def _unescape(uri: str, text: str, *, host: bool = False) -> str:
    bad = _BAD_ESCAPE.search(text)
    if bad:
        raise URISyntaxError(uri, f'invalid URL escape "{bad.group(0)}"')
    if host:
        for match in _ASCII_ESCAPE.finditer(text):
            if match.group(0) != "%25":
                raise URISyntaxError(uri, f'invalid URL escape "{match.group(0)}"')
        invalid = _INVALID_HOST_CHAR.search(text)
        if invalid:
            raise URISyntaxError(uri, f'invalid character "{invalid.group(0)}" in host name')
    return unquote(text)


def _parse_host(uri: str, host: str) -> str:
    if host.startswith("["):
        end = host.rfind("]")
        if end < 0:
            raise URISyntaxError(uri, "missing ']' in host")
        colon_port = host[end + 1 :]
    else:
        colon = host.rfind(":")
        colon_port = host[colon:] if colon != -1 else ""

    if not _OPTIONAL_PORT.fullmatch(colon_port):
        raise URISyntaxError(uri, f'invalid port "{colon_port}" after host')
    return _unescape(uri, host, host=True)


def _parse_authority(uri: str, reference: URIReference, authority: str) -> None:
    userinfo, at_sign, host = authority.rpartition("@")
    reference.host = _parse_host(uri, host)
    if not at_sign:
        return

    if not _USERINFO.fullmatch(userinfo):
        raise URISyntaxError(uri, "invalid userinfo")
    username, colon, password = userinfo.partition(":")
    reference.username = _unescape(uri, username)
    if colon:
        reference.password = _unescape(uri, password)


def _canonical_escaped(uri: str, raw: str, pattern: re.Pattern[str], safe: str) -> str:
    decoded = _unescape(uri, raw)
    if pattern.fullmatch(raw):
        return raw
    return quote(decoded, safe=safe)


def split_uri(uri: str) -> URIReference:
    """Split ``uri`` into its syntactic parts.

    Raises:
        URISyntaxError: when the string violates the URI grammar.
    """

    if _CONTROL_CHARS.search(uri):
        raise URISyntaxError(uri, "invalid control character in URI")

    rest, hash_mark, fragment = uri.partition("#")
    reference = URIReference()
    if hash_mark:
        reference.fragment = _canonical_escaped(uri, fragment, _VALID_ENCODED_FRAGMENT, _FRAGMENT_SAFE)

    # Errors below name the URI without its fragment.
    target = rest
    scheme_match = _SCHEME.match(rest)
    if scheme_match:
        reference.scheme = scheme_match.group(1).lower()
        rest = rest[scheme_match.end() :]
    elif rest.startswith(":"):
        raise URISyntaxError(target, "missing protocol scheme")

    rest, question_mark, query = rest.partition("?")
    if question_mark:
        reference.query = query

    if not rest.startswith("/"):
        if reference.scheme:
            reference.opaque = rest
            return reference
        if ":" in rest.partition("/")[0]:
            raise URISyntaxError(target, "first path segment in URL cannot contain colon")

    if (reference.scheme or not rest.startswith("///")) and rest.startswith("//"):
        authority, slash, path = rest[2:].partition("/")
        _parse_authority(target, reference, authority)
        rest = slash + path

    reference.path = _canonical_escaped(target, rest, _VALID_ENCODED_PATH, _PATH_SAFE)
    return reference


def compose_uri(reference: URIReference) -> str:
    """Assemble a URI string from its parts."""

    parts: list[str] = []
    if reference.scheme:
        parts.append(f"{reference.scheme}:")

    if reference.opaque:
        parts.append(reference.opaque)
    else:
        has_user = reference.username is not None
        has_authority = reference.host is not None or has_user
        # A scheme-less reference with an empty host has no authority to write.
        if (reference.scheme or reference.host or has_user) and has_authority:
            if reference.host or reference.path or has_user:
                parts.append("//")
        if has_user:
            userinfo = quote(reference.username or "", safe=_USERINFO_SAFE)
            if reference.password is not None:
                userinfo += ":" + quote(reference.password, safe=_USERINFO_SAFE)
            parts.append(f"{userinfo}@")
        if reference.host:
            parts.append(quote(reference.host, safe=_HOST_SAFE))

        path = reference.path
        if path and not path.startswith("/") and reference.host:
            parts.append("/")
        if not parts and ":" in path.partition("/")[0]:
            # Keep a colon in the first segment from reading as a scheme.
            parts.append("./")
        parts.append(path)

    if reference.query is not None:
        parts.append(f"?{reference.query}")
    if reference.fragment is not None:
        parts.append(f"#{reference.fragment}")
    return "".join(parts)
