"""
Typed exceptions for service layer operations.

Every error carries its kind and HTTP status from the raise site, so the API
layer maps exceptions to responses without inspecting message text. Messages
are user-facing and returned verbatim in the ``{"message": ...}`` body.
"""
from enum import StrEnum


class ErrorKind(StrEnum):
    """Category of a service error."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"


class ServiceError(Exception):
    """Base class for errors that map directly to an HTTP response."""

    kind: ErrorKind = ErrorKind.VALIDATION
    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnauthenticatedError(ServiceError):
    """Missing, malformed, invalid or expired bearer token."""

    kind = ErrorKind.UNAUTHENTICATED
    status_code = 401


class ForbiddenError(ServiceError):
    """Authenticated caller is neither the owner nor an admin."""

    kind = ErrorKind.FORBIDDEN
    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class NotFoundError(ServiceError):
    """Requested resource does not exist."""

    kind = ErrorKind.NOT_FOUND
    status_code = 404


class PropertyNotFoundError(NotFoundError):
    def __init__(self, property_id: int) -> None:
        self.property_id = property_id
        super().__init__("Property not found")


class FavoriteNotFoundError(NotFoundError):
    def __init__(self, favorite_id: int) -> None:
        self.favorite_id = favorite_id
        super().__init__("Favorite not found")


class UserNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("User not found")


class ConflictError(ServiceError):
    """A unique field or pair is already taken."""

    kind = ErrorKind.CONFLICT
    status_code = 400


class DuplicateFavoriteError(ConflictError):
    """Raised when the (user, property) pair is already a favorite."""

    def __init__(self, user_id: int, property_id: int) -> None:
        self.user_id = user_id
        self.property_id = property_id
        super().__init__("Property already in favorites")


class UserAlreadyExistsError(ConflictError):
    def __init__(self) -> None:
        super().__init__("User already exists")


class BadRequestError(ServiceError):
    """Request is well-formed but semantically unusable."""

    kind = ErrorKind.VALIDATION
    status_code = 400


class ProfileFetchFailedError(ServiceError):
    """
    The user service could not return a profile.

    Covers missing caller token, network failure, timeouts and remote 404 alike;
    callers cannot tell "no such user" from "user service down".
    """

    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    status_code = 500

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("Failed to fetch user")


class OwnerProfileUnavailableError(BadRequestError):
    """The creating user's profile could not be read, so the listing was rejected."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__("Failed to fetch user")
