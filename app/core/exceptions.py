from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """Raised when a row does not exist or RLS hides it from the caller.

    The two cases are indistinguishable on purpose: an inaccessible profile
    is reported exactly like a missing one.
    """

    def __init__(self, resource: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )


class DuplicateError(HTTPException):
    """Raised when a unique row already exists (e.g. a second profile)."""

    def __init__(self, resource: str, field: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{resource} with this {field} already exists",
        )


class ForbiddenError(HTTPException):
    """Raised when the policy set rejects a write."""

    def __init__(self, message: str = "Not authorized to modify this resource"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=message,
        )


class ValidationError(HTTPException):
    """Raised for business-rule violations (unknown plan, unknown specialty)."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


class SignupError(HTTPException):
    """Raised when Supabase Auth refuses to create the account."""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Signup failed: {message}",
        )


class ServiceUnavailableError(HTTPException):
    """Raised when a backing service is not configured or not reachable.

    The detail is deliberately generic; the cause goes to the log.
    """

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=message,
        )
