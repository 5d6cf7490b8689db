# barbershop/errors.py

"""Error taxonomy for the booking core.

Every caller-visible error carries the HTTP status the API layer answers
with; ``NotificationError`` never reaches a caller.
"""

from typing import Optional


class BookingError(Exception):
    status_code = 400
    kind = "booking_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.kind}


class ValidationError(BookingError):
    """Malformed input. ``field`` names the first violated constraint."""

    status_code = 422
    kind = "validation_error"

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["field"] = self.field
        return body


class InvalidStatusError(ValidationError):
    kind = "invalid_status"

    def __init__(self, status: object):
        super().__init__("status", f"'{status}' is not a valid appointment status")
        self.status = status


class NotAuthorizedError(BookingError):
    status_code = 403
    kind = "not_authorized"


class NotEligibleError(BookingError):
    status_code = 409
    kind = "not_eligible"


class StoreError(BookingError):
    status_code = 503
    kind = "store_error"


class RecordNotFoundError(StoreError):
    status_code = 404
    kind = "not_found"

    def __init__(self, table: str, record_id: object):
        super().__init__(f"{table} record {record_id} not found")
        self.table = table
        self.record_id = record_id


class DuplicateRecordError(StoreError):
    status_code = 409
    kind = "duplicate"


class NotificationError(Exception):
    """Raised by notifiers; the outbox logs and discards it."""

    def __init__(self, message: str, recipient: Optional[str] = None):
        super().__init__(message)
        self.recipient = recipient
