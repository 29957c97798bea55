"""Query string codec shared by the formatter and the parser."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from urllib.parse import unquote_plus, urlencode

logger = logging.getLogger("uri_builtins.query")

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def encode_query(values: Mapping[str, Sequence[str]]) -> str:
    """Encode a multi-valued mapping as ``key=value&...`` with keys sorted."""

    return urlencode(sorted((key, list(items)) for key, items in values.items()), doseq=True)


def decode_query(raw_query: str) -> dict[str, list[str]]:
    """Decode a raw query into key -> ordered list of values."""

    decoded: dict[str, list[str]] = {}
    for pair in raw_query.split("&"):
        if not pair:
            continue
        key, _, value = pair.partition("=")
        if ";" in key:
            logger.debug("query_pair_dropped reason=semicolon pair=%r", pair)
            continue
        if _BAD_ESCAPE.search(key) or _BAD_ESCAPE.search(value):
            logger.debug("query_pair_dropped reason=invalid_escape pair=%r", pair)
            continue
        decoded.setdefault(unquote_plus(key), []).append(unquote_plus(value))
    return decoded
