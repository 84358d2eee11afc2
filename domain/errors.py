"""Domain error codes for listings, availability and bookings."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Domain error codes."""

    INVALID_RANGE = "INVALID_RANGE"
    OVERLAPPING_RANGE = "OVERLAPPING_RANGE"
    DUPLICATE_RANGE = "DUPLICATE_RANGE"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    DATE_RANGE_UNAVAILABLE = "DATE_RANGE_UNAVAILABLE"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INVALID_STATE = "INVALID_STATE"
    INVALID_QUERY = "INVALID_QUERY"
    INVALID_LISTING = "INVALID_LISTING"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidRangeError(DomainError):
    """Raised when a date range does not cover at least one night."""

    def __init__(self, message: str = "Start date must be before end date") -> None:
        super().__init__(code=ErrorCode.INVALID_RANGE, message=message)


class OverlappingRangeError(DomainError):
    """Raised when new open dates overlap already-open dates."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.OVERLAPPING_RANGE,
            message="Dates could not be added, they overlap already-open dates",
        )


class DuplicateRangeError(DomainError):
    """Raised when new open dates are identical to already-open dates."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_RANGE,
            message="Dates could not be added, they are already open for the listing",
        )


class CapacityExceededError(DomainError):
    def __init__(self, requested: int, capacity: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message=f"Number of guests ({requested}) must be between 1 and the listing capacity ({capacity})",
        )
        self.requested = requested
        self.capacity = capacity


class DateRangeUnavailableError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DATE_RANGE_UNAVAILABLE,
            message="Requested dates are not within the listing's available dates",
        )


class ConflictError(DomainError):
    """Raised when requested dates collide with another active booking."""

    def __init__(self, message: str = "Requested dates collide with an existing booking") -> None:
        super().__init__(code=ErrorCode.CONFLICT, message=message)


class UnauthorizedError(DomainError):
    def __init__(self, message: str = "Current user is not allowed to perform this action") -> None:
        super().__init__(code=ErrorCode.UNAUTHORIZED, message=message)


class NotFoundError(DomainError):
    """Raised when a listing, booking or user does not exist."""

    def __init__(self, resource: str, resource_id: object) -> None:
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"No {resource} with id '{resource_id}'",
        )
        self.resource = resource
        self.resource_id = resource_id


class InvalidStateError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_STATE, message=message)


class InvalidQueryError(DomainError):
    """Raised when search parameters are out of range."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_QUERY, message=message)


class InvalidListingError(DomainError):
    """Raised when a listing's price or capacity is out of range."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_LISTING, message=message)
