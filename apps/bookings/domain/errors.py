"""
Scheduling Errors

Typed failures of the scheduling core. Each carries a stable ``code``
that the API layer maps to an HTTP status and a ``message`` that is
safe to show to the caller.
"""


class SchedulingError(Exception):
    """Base class for all scheduling failures."""

    code = "error"
    default_message = "Operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthorized(SchedulingError):
    """Wrong caller for an authorization-gated operation."""

    code = "not_authorized"
    default_message = "Not authorized"


class NotFound(SchedulingError):
    """Missing invite, hold, booking, venue or profile."""

    code = "not_found"
    default_message = "Not found"


class InsufficientFunds(SchedulingError):
    """Balance does not cover a fee."""

    code = "insufficient_funds"
    default_message = "Insufficient balance"


class IneligibleOperation(SchedulingError):
    """Timing or state rule forbids the operation (swap window, taken slot)."""

    code = "ineligible"
    default_message = "Operation not allowed"


class HoldExpired(IneligibleOperation):
    """The hold lapsed before confirmation; availability must be searched again."""

    default_message = "Hold has expired. Please pick a new time."


class HoldAlreadyConsumed(IneligibleOperation):
    """The hold was already turned into a booking."""

    default_message = "Hold has already been confirmed."


class ExternalServiceFailure(SchedulingError):
    """Calendar provider or mail delivery failed."""

    code = "external_service"
    default_message = "External service unavailable"
