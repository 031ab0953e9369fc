"""Client-side validation stage run before any remote dispatch."""

from __future__ import annotations

import dataclasses
from typing import Any, Generic, Mapping, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationInfo
from pydantic import ValidationError as PydanticValidationError

from nadi.common.exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)


@dataclasses.dataclass(frozen=True)
class ValidationResult(Generic[M]):
    """Either a validated payload or the reason it was rejected."""

    value: Optional[M] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> M:
        if self.error is not None:
            raise self.error
        assert self.value is not None
        return self.value


def field_errors(exc: PydanticValidationError) -> dict[str, list[str]]:
    """Flatten pydantic errors into ``{"field": ["message", ...]}``."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc", ())
        name = ".".join(str(p) for p in loc) if loc else "__root__"
        message = err.get("msg", "Invalid value")
        # model-level validators report "Value error, <msg>"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(name, []).append(message)
    return errors


def validate_payload(
    schema: type[M],
    payload: Union[M, Mapping[str, Any]],
) -> ValidationResult[M]:
    """Validate *payload* against *schema* without touching any remote state."""
    if isinstance(payload, schema):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return ValidationResult(value=schema.model_validate(payload))
    except PydanticValidationError as exc:
        return ValidationResult(error=ValidationError(field_errors(exc)))


def reject_null(value: Any, info: ValidationInfo) -> Any:
    """Field check for partial updates: a required column may be left out, never nulled."""
    if value is None:
        raise ValueError(f"{info.field_name} must not be null.")
    return value
