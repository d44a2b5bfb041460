"""Error taxonomy shared by the engine and the entity services."""

from enum import Enum

from attrs import frozen
from beartype import beartype
from pydantic import ValidationError


class ErrorCode(str, Enum):
    """Enumeration of operation failure kinds."""

    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INVALID_STATE = "INVALID_STATE"
    COVERAGE_EXCEEDED = "COVERAGE_EXCEEDED"
    RATE_LIMITED = "RATE_LIMITED"
    DECODE_ERROR = "DECODE_ERROR"


@frozen
class EntityError:
    """Tagged operation failure with a message naming the offending rule."""

    code: ErrorCode
    message: str
    field: str | None = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    @classmethod
    @beartype
    def not_found(cls, message: str, field: str | None = None) -> "EntityError":
        return cls(ErrorCode.NOT_FOUND, message, field)

    @classmethod
    @beartype
    def duplicate_key(cls, key: str) -> "EntityError":
        return cls(ErrorCode.DUPLICATE_KEY, f"{key} already exists")

    @classmethod
    @beartype
    def validation(cls, message: str, field: str | None = None) -> "EntityError":
        return cls(ErrorCode.VALIDATION_ERROR, message, field)

    @classmethod
    @beartype
    def invalid_transition(cls, current: str, requested: str) -> "EntityError":
        return cls(
            ErrorCode.INVALID_TRANSITION,
            f"Invalid status transition from {current} to {requested}",
            "status",
        )

    @classmethod
    @beartype
    def invalid_state(cls, message: str, field: str | None = "status") -> "EntityError":
        return cls(ErrorCode.INVALID_STATE, message, field)

    @classmethod
    @beartype
    def from_validation_error(cls, exc: ValidationError) -> "EntityError":
        """Translate a pydantic ValidationError into a tagged error.

        The first failing location becomes ``field`` so callers can point at
        the offending input.
        """
        errors = exc.errors()
        if not errors:
            return cls.validation(str(exc))

        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "Invalid value")
        if location:
            message = f"{location}: {message}"
        return cls.validation(message, location or None)


class EntityOperationError(ValueError):
    """Raised when an Err result is unwrapped."""

    def __init__(self, error: EntityError) -> None:
        super().__init__(str(error))
        self.error = error

    @property
    def code(self) -> ErrorCode:
        return self.error.code
