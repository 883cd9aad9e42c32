from typing import Any, Dict, Optional

class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)

class ValidationError(AppException):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=400,
            error_code="VALIDATION_ERROR",
            details=details
        )

class AuthenticationError(AppException):
    def __init__(self, message: str = "Invalid credentials."):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )

class NotFoundError(AppException):
    def __init__(self, message: str = "Not found."):
        super().__init__(
            message=message,
            status_code=404,
            error_code="NOT_FOUND"
        )

class SchemaError(AppException):
    """Raised when the deployed schema lacks a column a query cannot do without."""
    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=500,
            error_code="SCHEMA_MISMATCH"
        )
