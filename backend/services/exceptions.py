"""Error taxonomy shared by every service operation.

Views never build error payloads themselves; they let these propagate and the
DRF exception handler in common.exceptions renders the uniform envelope.
"""


class ServiceError(Exception):
    """Base class for errors raised by the service layer."""

    code = "error"
    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str = "", **extra):
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)


class OrderValidationError(ServiceError):
    """Raised when input is malformed or missing."""

    code = "validation_error"
    status_code = 400
    default_message = "Invalid request payload"


class StateConflictError(ServiceError):
    """Raised when an action is invalid for the current status (lost races included)."""

    code = "state_conflict"
    status_code = 409
    default_message = "This action is not allowed in the current state"


class NotFoundError(ServiceError):
    """Raised when a resource is missing or not visible to the caller."""

    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class QuotaExceededError(ServiceError):
    """Raised when a quota (tickets, report limit) blocks the action."""

    code = "quota_exceeded"
    status_code = 429
    default_message = "Quota exceeded"


class InsufficientTicketsError(QuotaExceededError):
    status_code = 402
    default_message = "Not enough tickets, please top up first"


class ReportLimitReachedError(QuotaExceededError):
    status_code = 429
    default_message = "Report limit for this order has been reached"


class UnauthorizedError(ServiceError):
    """Raised when the caller's role may not perform the action."""

    code = "unauthorized"
    status_code = 403
    default_message = "You are not allowed to perform this action"


class UpstreamDegradedError(ServiceError):
    """Raised by geocoding/routing lookups; always caught and replaced by a fallback."""

    code = "upstream_degraded"
    status_code = 503
    default_message = "Upstream service unavailable"
