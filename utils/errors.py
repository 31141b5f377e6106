"""Error taxonomy shared by services, controllers and routes.

Services raise these; controllers translate them into `HTTPException`
using the `status_code` each class carries. Route catch-alls raise
`Internal` for failures nothing else anticipated.
"""

from fastapi import HTTPException


class ApiError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.message)


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class BadRequest(ApiError):
    status_code = 400
    default_message = "Bad request"


class UnsupportedMediaType(ApiError):
    status_code = 415
    default_message = "Invalid file type. Only JPEG, PNG, GIF and WebP are allowed."


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden"


class StorageFailure(ApiError):
    """A storage backend failed to write or delete bytes."""

    status_code = 500
    default_message = "Storage backend failure"


class Internal(ApiError):
    status_code = 500
    default_message = "Internal server error"
