"""Domain errors raised by services and translated to HTTP responses in main.py."""

from fastapi import status


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """Entity id does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND


class InputValidationError(ServiceError):
    """Required input missing or referencing something that does not exist."""

    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamError(ServiceError):
    """A call to the remote assistant provider failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageError(ServiceError):
    """The persistence gateway failed. Never retried."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
