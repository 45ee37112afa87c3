"""
Request body validation.

validate_payload() runs a pydantic schema over a raw JSON body and returns a
tagged result instead of raising, so each endpoint decides how to report
field errors.
"""
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class Valid(Generic[SchemaT]):
    value: SchemaT


@dataclass(frozen=True)
class Invalid:
    errors: list[FieldError] = field(default_factory=list)

    @property
    def first_message(self) -> str:
        return self.errors[0].message


ValidationResult = Union[Valid[SchemaT], Invalid]


class PostValidationError(Exception):
    """A request the client must fix. Always reported as 400."""

    def __init__(self, message: str, plain_text: bool = False):
        super().__init__(message)
        self.message = message
        self.plain_text = plain_text


def _field_error(error: dict) -> FieldError:
    loc = error.get("loc") or ()
    name = str(loc[0]) if loc else "body"
    if error.get("type") == "missing":
        return FieldError(name, f"Missing `{name}` in request body")
    return FieldError(name, f"Invalid `{name}` in request body: {error.get('msg')}")


def validate_payload(schema: type[SchemaT], body: Any) -> ValidationResult:
    """Validate a decoded JSON body against schema."""
    if not isinstance(body, dict):
        return Invalid([FieldError("body", "Request body must be a JSON object")])
    try:
        return Valid(schema.model_validate(body))
    except ValidationError as exc:
        return Invalid([_field_error(error) for error in exc.errors()])
