"""Engine error taxonomy."""


class EngineError(Exception):
    """Base class for caller-visible engine failures."""

    code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthenticatedError(EngineError):
    """Raised when a request carries no verified caller identity."""

    code = "UNAUTHORIZED"


class InvalidInputError(EngineError):
    """Raised for malformed intervals, negative amounts or bad pagination."""

    code = "BAD_REQUEST"


class ConflictError(EngineError):
    """Raised when a write collides with existing data, e.g. overlapping goals."""

    code = "CONFLICT"


class NotFoundError(EngineError):
    """Raised when a record is absent or not owned by the caller."""

    code = "NOT_FOUND"
