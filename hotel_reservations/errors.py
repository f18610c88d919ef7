"""
Domain errors raised by the reservation services.

Every business-rule violation is reported synchronously by the operation that
detects it, as one of the classes below. Each class carries the HTTP status it
maps to and a short classification code; routes let them propagate and the
application-level handler in main.py renders them as
``{"message": ..., "error": ...}``.

Storage or unexpected failures are not wrapped here: route handlers log them
and answer with an opaque 500.
"""

from __future__ import annotations


class ReservationError(Exception):
    """Base class for all expected failures of the reservation core."""

    status_code: int = 400
    code: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ReservationError):
    """Malformed or missing input. Never retried."""

    status_code = 400
    code = "validation_error"


class EmailMismatchError(ValidationError):
    """Supplied email does not match the guest on the reservation."""

    code = "email_mismatch"


class UnauthorizedError(ReservationError):
    """Caller is not authenticated, or credentials are wrong."""

    status_code = 401
    code = "unauthorized"


class ForbiddenError(ReservationError):
    """Caller is authenticated but may not act on the target entity."""

    status_code = 403
    code = "forbidden"


class NotFoundError(ReservationError):
    status_code = 404
    code = "not_found"


class RoomNotFoundError(NotFoundError):
    code = "room_not_found"


class NoPendingRequestError(NotFoundError):
    """Approve/reject called with no pending change request."""

    code = "no_pending_request"


class ConflictError(ReservationError):
    status_code = 409
    code = "conflict"


class AlreadyLinkedError(ConflictError):
    """Reservation already belongs to a different registered guest."""

    code = "already_linked"


class AccountAlreadyExistsError(ConflictError):
    code = "account_already_exists"
