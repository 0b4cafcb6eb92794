"""Domain errors raised by RoomCheck services.

Every error carries the HTTP status it maps to. Routers let them propagate and
the application exception handler in ``roomcheck.main`` turns them into JSON.
"""

from fastapi import status


class RoomCheckError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def name(self) -> str:
        return type(self).__name__


class ConfigError(RoomCheckError):
    """Required credentials or settings are missing. Raised before any I/O."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class InvalidInput(RoomCheckError):
    """Non-image file, empty file batch or empty required field."""

    status_code = status.HTTP_400_BAD_REQUEST


class NoReferenceImages(RoomCheckError):
    """Room has no "before" photos to compare against."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class NotFound(RoomCheckError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(RoomCheckError):
    """Operation not allowed in the document's current status."""

    status_code = status.HTTP_409_CONFLICT


class IndexOutOfRange(RoomCheckError):
    status_code = status.HTTP_404_NOT_FOUND


class UploadFailed(RoomCheckError):
    status_code = status.HTTP_502_BAD_GATEWAY


class ProviderError(RoomCheckError):
    """Vision provider answered with an error. Message is passed through."""

    status_code = status.HTTP_502_BAD_GATEWAY


class EmptyResult(RoomCheckError):
    """Vision provider answered without any choices."""

    status_code = status.HTTP_502_BAD_GATEWAY


class PersistFailed(RoomCheckError):
    """Document store write failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthFailed(RoomCheckError):
    """Identity provider rejected sign-in or sign-up."""

    status_code = status.HTTP_401_UNAUTHORIZED


class StoreUnavailable(RoomCheckError):
    """Document store read failed."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
