from typing import Any, Optional
from fastapi import status


class AppError(Exception):
    """Base for errors raised by the service layer and rendered by the global handler"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class ValidationError(AppError):
    """Malformed or missing required input"""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AppError):
    """Referenced class, cart or status-update target does not exist"""
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(AppError):
    """Store unreachable or operation rejected"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
