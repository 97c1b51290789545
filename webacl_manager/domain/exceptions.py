"""Exceptions raised by the Web ACL manager."""


class WebACLError(Exception):
    """Base class for all Web ACL manager errors."""


class ConfigurationError(WebACLError):
    """The declared configuration cannot be turned into a valid request."""


class WafApiError(WebACLError):
    """An error reported by the WAF API."""

    def __init__(self, code: str, message: str, operation: str | None = None):
        self.code = code
        self.message = message
        self.operation = operation
        prefix = f"{operation}: " if operation else ""
        super().__init__(f"{prefix}{code}: {message}")


class WafNotFoundError(WafApiError):
    """The requested WAF entity does not exist."""


class WafTransientError(WafApiError):
    """
    A retryable WAF error.

    Raised for stale or already-used change tokens, throttling and
    entities that are not yet available.
    """


class WebACLOperationError(WebACLError):
    """A Web ACL mutation failed and was not retried (or could not be)."""

    def __init__(self, operation: str, cause: Exception, detail: str | None = None):
        self.operation = operation
        self.cause = cause
        reason = f"{detail}: {cause}" if detail else str(cause)
        super().__init__(f"Error {operation}: {reason}")


class RetryBudgetExhaustedError(WebACLOperationError):
    """A mutation kept failing with transient errors until the retry budget ran out."""

    def __init__(self, operation: str, attempts: int, cause: Exception):
        self.attempts = attempts
        super().__init__(operation, cause, detail=f"gave up after {attempts} attempts")
