"""Registration of the URI builtins for a policy evaluator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from uri_builtins.errors import URIError
from uri_builtins.formatter import format_uri
from uri_builtins.parser import parse_uri

BUILTIN_ERROR_CODE = "eval_builtin_error"

logger = logging.getLogger("uri_builtins.builtins")


class BuiltinError(Exception):
    """Evaluation error reported to the host, prefixed with the builtin name."""

    def __init__(self, name: str, detail: str):
        super().__init__(f"{name}: {detail}")
        self.code = BUILTIN_ERROR_CODE
        self.name = name
        self.message = f"{name}: {detail}"


class UnknownBuiltinError(LookupError):
    """Raised when a builtin name is not registered."""


@dataclass(frozen=True, slots=True)
class Builtin:
    name: str
    function: Callable[[Any], Any]
    operand_type: str
    result_type: str


BUILTINS: dict[str, Builtin] = {
    builtin.name: builtin
    for builtin in (
        Builtin(name="uri.format", function=format_uri, operand_type="object", result_type="string"),
        Builtin(name="uri.parse", function=parse_uri, operand_type="string", result_type="object"),
    )
}


def get_builtin(name: str) -> Builtin:
    try:
        return BUILTINS[name]
    except KeyError as exc:
        raise UnknownBuiltinError(f"unknown builtin {name}") from exc


def call_builtin(name: str, operand: Any) -> Any:
    """
    Evaluate one builtin against an already-decoded operand.

    Raises:
        UnknownBuiltinError: when ``name`` is not registered.
        BuiltinError: when the builtin rejects its operand.
    """

    builtin = get_builtin(name)
    try:
        return builtin.function(operand)
    except URIError as exc:
        logger.info("builtin_failed name=%s error=%s", name, exc)
        raise BuiltinError(name, str(exc)) from exc
