from fastapi import status


class CortexError(Exception):
    """Base class for errors reported to API callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CortexError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(CortexError):
    status_code = status.HTTP_404_NOT_FOUND


class PermissionDeniedError(CortexError):
    status_code = status.HTTP_403_FORBIDDEN
