from typing import Optional, Any

class DevserveError(Exception):
    """
    Base exception for the devserve application.

    `message` is the user-facing summary, `error` the underlying cause (for
    instance a raw store error) and `data` the payload echoed back in the
    response envelope.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        error: Optional[str] = None,
        data: Optional[Any] = None,
        details: Optional[Any] = None,
        pagination: Optional[Any] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.error = error
        self.data = data
        self.details = details
        self.pagination = pagination
        super().__init__(self.message)

class ResourceNotFoundError(DevserveError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", data: Optional[Any] = None, pagination: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, data=data, pagination=pagination)

class AuthenticationError(DevserveError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Invalid email or password", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ConflictError(DevserveError):
    """
    Raised when a request clashes with existing data (e.g. an email already registered).
    """
    def __init__(self, message: str = "Conflict", error: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=400, error=error, details=details)

class DuplicateEntryError(DevserveError):
    """
    Raised when an insert hits a unique index. The client may retry the request.
    """
    def __init__(self, message: str = "Duplicate entry", error: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, code="DUPLICATE_KEY", status_code=409, error=error, details=details)

class ValidationError(DevserveError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", error: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, error=error, details=details)

class StoreError(DevserveError):
    """
    Raised when the document store fails or is unreachable.
    """
    def __init__(self, message: str = "Server Error", error: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, code="STORE_ERROR", status_code=500, error=error, details=details)

class IdAllocationError(DevserveError):
    """
    Raised when a natural ID cannot be allocated (store failure or exhausted sequence).
    """
    def __init__(self, message: str = "Failed to generate unique ID", error: Optional[str] = None):
        super().__init__(message, code="ID_ALLOCATION_FAILED", status_code=500, error=error)
