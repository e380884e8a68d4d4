from typing import Optional, Any, List

class GymVisaError(Exception):
    """
    Base exception for the Gym Visa admin API.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Any] = None,
        errors: Optional[List[str]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.errors = errors
        super().__init__(self.message)

class ResourceNotFoundError(GymVisaError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class AuthenticationError(GymVisaError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ValidationError(GymVisaError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)

class ExternalServiceError(GymVisaError):
    """
    Raised when an external service (auth store, SMTP, push gateway) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)

class DuplicateEmailError(GymVisaError):
    def __init__(self, message: str = "Email already exists", details: Optional[Any] = None):
        super().__init__(message, code="DUPLICATE_EMAIL", status_code=400, details=details)

class InvalidEmailError(GymVisaError):
    def __init__(self, message: str = "Invalid email format", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_EMAIL", status_code=400, details=details)

class WeakPasswordError(GymVisaError):
    def __init__(self, message: str = "Password is too weak", details: Optional[Any] = None):
        super().__init__(message, code="WEAK_PASSWORD", status_code=400, details=details)

class UserNotFoundError(GymVisaError):
    def __init__(self, message: str = "User not found", details: Optional[Any] = None):
        super().__init__(message, code="USER_NOT_FOUND", status_code=404, details=details)

class InvalidTransitionError(GymVisaError):
    """
    Raised when a status change is not allowed from the current status.
    """
    def __init__(self, message: str = "Invalid status transition", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_TRANSITION", status_code=409, details=details)

class BatchFailedError(GymVisaError):
    """
    Raised when every item of a bulk operation failed.
    """
    def __init__(self, message: str, errors: List[str]):
        super().__init__(message, code="BATCH_FAILED", status_code=500, errors=errors)

class DocumentParseError(GymVisaError):
    """
    Raised when a stored document does not match its expected shape.
    """
    def __init__(self, message: str = "Stored document is malformed", details: Optional[Any] = None):
        super().__init__(message, code="DOCUMENT_PARSE_ERROR", status_code=500, details=details)
