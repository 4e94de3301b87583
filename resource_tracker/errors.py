"""Error taxonomy and the result type returned by state operations."""
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

T = TypeVar("T")


class TrackerError(Exception):
    """Base class for all resource tracker failures."""
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(TrackerError):
    """Bad or missing input, detected before any remote call."""
    kind = "validation"


class NotAuthenticated(TrackerError):
    """Operation attempted without an active identity."""
    kind = "not_authenticated"

    def __init__(self, message: str = "You must be signed in"):
        super().__init__(message)


class ServiceError(TrackerError):
    """The remote data service rejected or failed to complete a call."""
    kind = "service"


class NotFoundError(ServiceError):
    """Target record is absent or not owned by the caller."""
    kind = "not_found"

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class BusyError(TrackerError):
    """Another mutation on the same record is still in flight."""
    kind = "busy"

    def __init__(self, message: str = "Another change to this resource is in progress"):
        super().__init__(message)


class StaleResponseError(TrackerError):
    """A response arrived after the state it belonged to was cleared."""
    kind = "stale"

    def __init__(self, message: str = "The resource list changed while the request was running"):
        super().__init__(message)


@dataclass
class OperationResult(Generic[T]):
    """Discriminated success/failure value."""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    kind: Optional[str] = None
    pending_confirmation: bool = False

    @classmethod
    def ok(cls, data: Any = None, pending_confirmation: bool = False) -> "OperationResult":
        return cls(success=True, data=data, pending_confirmation=pending_confirmation)

    @classmethod
    def fail(cls, exc: TrackerError) -> "OperationResult":
        return cls(success=False, error=exc.message, kind=exc.kind)


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Turn the first pydantic error into a message fit for a form banner."""
    error = exc.errors()[0]
    field = str(error["loc"][0]) if error["loc"] else "input"
    label = field.replace("_", " ").capitalize()
    if error["type"] == "enum":
        return f"{label} must be one of: {error['ctx']['expected']}"
    if error["type"] == "value_error":
        return f"{label} {error['ctx']['error']}"
    return f"{label}: {error['msg']}"


def validate_fields(schema: Type[BaseModel], fields: Mapping[str, Any]) -> BaseModel:
    try:
        return schema.model_validate(dict(fields))
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e))
