class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(CustomBaseError):
    """Bad user input. Recoverable: re-prompt, no state change."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class ConflictError(CustomBaseError):
    """Operation invalid for the current state or would break an invariant."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class CapacityError(CustomBaseError):
    """Seat-count limit per booking exceeded."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ProviderError(CustomBaseError):
    """Data-source failure. Queries and order submission may be retried."""

    def __init__(self, message: str, *, retryable: bool = True) -> None:
        self.retryable = retryable
        super().__init__(message, 502)
