"""
Error taxonomy and the result type returned by every service entry point.

Services never let collaborator exceptions (SQLAlchemy, httpx, bcrypt)
cross their boundary: they are logged and translated into one of the
ServiceError kinds below, then wrapped in a ServiceResult so routers can
render a message without inspecting internals.
"""
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ServiceError(Exception):
    """Base class for errors reported to callers of the services."""
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """A required field is missing or malformed."""
    kind = "validation"
    status_code = 400


class AuthenticationError(ServiceError):
    kind = "authentication"
    status_code = 401


class NotFoundError(ServiceError):
    kind = "not_found"
    status_code = 404


class ConflictError(ServiceError):
    kind = "conflict"
    status_code = 409


class GeocodeError(ServiceError):
    """The geocoder found no match or could not be reached."""
    kind = "geocode"
    status_code = 502


class PersistenceError(ServiceError):
    """
    A store read/write failed. The message is always generic; the raw
    database error is only ever logged.
    """
    kind = "persistence"
    status_code = 500

    def __init__(self, message: str = "Internal Server Error"):
        super().__init__(message)


@dataclass
class ServiceResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T = None) -> "ServiceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
