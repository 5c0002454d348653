"""
Application error types

Every error raised below the route layer is an AppError; main.py converts it
into a {"error", "field"?, "details"?} JSON response.
"""
from typing import Any, Dict, Optional
from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, field: Optional[str] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.field:
            body["field"] = self.field
        if self.details is not None:
            body["details"] = self.details
        return body


class ConfigurationError(AppError):
    """Missing credentials or identifiers for an external backend"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ReferenceSheetNotFound(NotFoundError):
    """An expected tab is missing from the reference spreadsheet"""

    def __init__(self, sheet_title: str):
        super().__init__(f"{sheet_title} sheet not found")
        self.sheet_title = sheet_title


class SchemaValidationError(AppError):
    """Submitted record failed the form's field rules; details maps field id -> message"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: Dict[str, str], message: str = "Invalid form data"):
        super().__init__(message, details=errors)
        self.errors = errors


class FieldValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, field: str, message: str):
        super().__init__(message, field=field)


class PermissionDeniedError(AppError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class ReferenceValidationUnavailable(AppError):
    """Allow-list could not be fetched, so constrained fields cannot be checked"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UpstreamError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class SubmissionTimeout(AppError):
    status_code = status.HTTP_408_REQUEST_TIMEOUT

    def __init__(self, message: str = "Request timeout. Please try again."):
        super().__init__(message)
