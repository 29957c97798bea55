"""Component record schema checks for ``uri.format``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, ValidationError, field_validator

from uri_builtins.errors import OperandTypeError, URIError, policy_type_name

REQUIRED_FIELDS = ("scheme", "path")
_EXPECTED_TYPES = {"port": "number", "query": "object"}


class ComponentRecord(BaseModel):
    """Closed schema of the fields a URI can be built from."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    scheme: StrictStr
    path: StrictStr
    username: StrictStr | None = None
    password: StrictStr | None = None
    hostname: StrictStr | None = None
    port: StrictInt | StrictFloat | StrictStr | None = None
    query: dict[StrictStr, list[StrictStr]] | None = None
    encoded_query: StrictStr | None = None
    fragment: StrictStr | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _reject_null(cls, value: Any) -> Any:
        # Absent fields keep their None default; an explicit null is a type error.
        if value is None:
            raise ValueError("null is not a valid parameter value")
        return value

    @field_validator("port", mode="before")
    @classmethod
    def _reject_boolean_port(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("boolean is not a valid port")
        return value


@dataclass(frozen=True, slots=True)
class ValidatedComponents:
    """Validated record plus the names of the fields the caller supplied."""

    record: ComponentRecord
    present: frozenset[str]

    def has(self, field: str) -> bool:
        return field in self.present


def _describe_error(err: dict[str, Any], payload: Mapping[Any, Any]) -> dict[str, str]:
    field = str(err["loc"][0]) if err["loc"] else "component_record"
    if err["type"] == "missing":
        message = f"{field} is a required parameter"
    elif err["type"] == "extra_forbidden":
        message = f"{field} is not a recognized parameter"
    elif field == "query" and isinstance(payload.get(field), dict):
        message = "parameter query should be a object of string arrays"
    else:
        expected = _EXPECTED_TYPES.get(field, "string")
        actual = policy_type_name(payload.get(field))
        message = f"parameter {field} should be a {expected} but is type {actual}"
    return {"field": field, "message": message, "type": err["type"]}


def _error_rank(detail: dict[str, str]) -> tuple[int, str]:
    if detail["type"] == "missing" and detail["field"] in REQUIRED_FIELDS:
        return REQUIRED_FIELDS.index(detail["field"]), detail["field"]
    return len(REQUIRED_FIELDS), detail["field"]


class URISchemaError(URIError):
    """Structured error for component records that fail schema checks."""

    def __init__(self, errors: list[dict[str, str]]):
        super().__init__(errors[0]["message"] if errors else "invalid component record")
        self.errors = errors

    @classmethod
    def from_pydantic_error(cls, exc: ValidationError, payload: Mapping[Any, Any]) -> URISchemaError:
        details: dict[str, dict[str, str]] = {}
        for err in exc.errors():
            detail = _describe_error(err, payload)
            # Union members report one error each; keep the first per field.
            details.setdefault(detail["field"], detail)
        return cls(sorted(details.values(), key=_error_rank))


def validate_component_record(payload: Any) -> ValidatedComponents:
    """
    Check a component record against the closed URI schema.

    Raises:
        OperandTypeError: when the operand is not an object.
        URISchemaError: when a field is missing, unknown, or of the wrong type.
    """

    if not isinstance(payload, Mapping):
        raise OperandTypeError(1, "object", policy_type_name(payload))

    try:
        record = ComponentRecord.model_validate(dict(payload))
    except ValidationError as exc:
        raise URISchemaError.from_pydantic_error(exc, payload) from exc

    return ValidatedComponents(record=record, present=frozenset(record.model_fields_set))
