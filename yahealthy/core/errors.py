"""Engine Errors - Failure kinds raised by the pure core.

Errors are raised synchronously and propagated unchanged to the caller,
which decides how to present them.
"""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError


ModelT = TypeVar("ModelT", bound=BaseModel)


class EngineError(Exception):
    """Base class for all engine failures."""

    code = "EngineError"


class ValidationError(EngineError):
    """Caller-supplied input violates a documented bound.

    Attributes:
        errors: One message per violated field
    """

    code = "ValidationError"

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


class NotFound(EngineError):
    """A referenced entity does not exist."""

    code = "NotFound"


class InvalidGoal(EngineError):
    """Progress is undefined for the goal (nothing to lose)."""

    code = "InvalidGoal"


class InvalidInput(EngineError):
    """The requested computation is undefined for the given values."""

    code = "InvalidInput"


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    if location:
        return f"{location}: {error['msg']}"
    return error["msg"]


def parse_input(model: type[ModelT], data: Any) -> ModelT:
    """Validate raw input into a typed model.

    Args:
        model: The pydantic model describing the input
        data: Mapping (or model instance) to validate

    Returns:
        Validated model instance

    Raises:
        ValidationError: With one message per violated constraint
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError([_format_error(err) for err in e.errors()]) from e


def error_payload(exc: EngineError) -> dict:
    """Describe an engine error as a JSON-friendly dict."""
    payload: dict[str, Any] = {"error": exc.code, "message": str(exc)}
    if isinstance(exc, ValidationError):
        payload["details"] = exc.errors
    return payload
