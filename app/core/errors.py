"""
Error taxonomy of the portal.

Every error a handler can raise on purpose derives from PortalError and
carries the HTTP status it maps to. Store errors are kept separate: they are
failures of the collaborator, not decisions of the portal.
"""
from typing import Optional


class PortalError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class Unauthenticated(PortalError):
    """No credential was sent at all."""
    status_code = 401
    message = "UnAuthorized access"


class InvalidCredential(PortalError):
    """A credential was sent but is malformed, forged or expired."""
    status_code = 403
    message = "Forbidden access"


class Forbidden(PortalError):
    """Valid credential, but not allowed to do this."""
    status_code = 403
    message = "forbidden access"


class UnknownPrincipal(PortalError):
    """Credential requested for an email that has no user record."""
    status_code = 403
    message = "Unknown user"


class BookingRejected(PortalError):
    status_code = 400
    message = "Invalid booking"


class NotFound(PortalError):
    status_code = 404
    message = "Not found"


class PaymentError(PortalError):
    status_code = 502
    message = "Payment processor error"


class StoreError(Exception):
    """Raised when the record store rejects or fails an operation."""


class DuplicateRecordError(StoreError):
    """Insert violated a unique constraint."""


class StoreConnectionError(StoreError):
    """The record store could not be reached at startup."""
