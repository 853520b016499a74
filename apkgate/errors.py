"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    code = "internal_error"

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_dict(self):
        """Render the error as a JSON response body."""
        return {
            "status": "error",
            "success": False,
            "code": self.code,
            "message": self.message,
        }


class ValidationError(AppError):
    """Raised when request input fails validation."""

    code = "validation_error"

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class UnauthorizedError(AppError):
    """Raised when the caller may not perform the operation."""

    code = "unauthorized"

    def __init__(self, message="Unauthorized"):
        """Initialize the error."""
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a resource is not found."""

    code = "not_found"

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class ConflictError(AppError):
    """Raised when trying to create a resource that already exists."""

    code = "conflict"

    def __init__(self, message="Resource already exists."):
        """Initialize the error."""
        super().__init__(message, 409)


class InternalError(AppError):
    """Raised when a collaborator (store, messaging, config) fails."""

    code = "internal_error"

    def __init__(self, message="Internal server error"):
        """Initialize the error."""
        super().__init__(message, 500)


class DeliveryError(InternalError):
    """Raised when a push notification is rejected by the messaging service."""

    code = "delivery_failed"

    def __init__(self, message, reason):
        """Initialize the error."""
        super().__init__(message)
        self.reason = reason

    def to_dict(self):
        """Render the error, including why delivery failed."""
        body = super().to_dict()
        body["reason"] = self.reason
        return body


class ConfigurationError(Exception):
    """Raised at startup when the service configuration is unusable."""

    pass
