from typing import Optional, Dict, List

from ticketing.utils.enum import ErrorCode


class AppError(Exception):
    """Base error carrying an API error code and the HTTP status it maps to."""

    code: str = ErrorCode.INTERNAL.value
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailed(AppError):
    code = ErrorCode.VALIDATION.value
    status_code = 400


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND.value
    status_code = 404

    def __init__(self, entity: str, details: Optional[Dict[str, List[str]]] = None):
        super().__init__(f"{entity} not found", details)


class InternalError(AppError):
    code = ErrorCode.INTERNAL.value
    status_code = 500
