# barbershop/validation.py

from datetime import date, datetime
from typing import Optional

from .data import (
    COMMENT_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    NOTES_MAX_LENGTH,
    SERVICES,
    STATUSES,
    TIME_SLOTS,
)
from .errors import InvalidStatusError, ValidationError

# Order matters: the first failing field is the one reported
APPOINTMENT_FIELDS = ("full_name", "service_type", "appointment_date", "appointment_time", "notes")


def parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            pass
    raise ValidationError("appointment_date", "Please select a valid date")


def validate_full_name(value) -> str:
    if not isinstance(value, str) or len(value) < NAME_MIN_LENGTH:
        raise ValidationError("full_name", "Full name must be at least 2 characters")
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationError("full_name", "Full name must be at most 100 characters")
    return value


def validate_service_type(value) -> str:
    if value not in SERVICES:
        raise ValidationError("service_type", "Please select a service type")
    return value


def validate_appointment_date(value, today: Optional[date] = None) -> date:
    parsed = parse_date(value)
    if parsed < (today or date.today()):
        raise ValidationError("appointment_date", "Cannot book an appointment in the past")
    return parsed


def validate_appointment_time(value) -> str:
    if value not in TIME_SLOTS:
        raise ValidationError("appointment_time", "Please select a time")
    return value


def validate_notes(value) -> Optional[str]:
    # empty notes are stored as null
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("notes", "Notes must be text")
    if len(value) > NOTES_MAX_LENGTH:
        raise ValidationError("notes", "Notes must be less than 500 characters")
    return value


def validate_status(value) -> str:
    if value not in STATUSES:
        raise InvalidStatusError(value)
    return value


def validate_appointment(fields: dict, partial: bool = False, today: Optional[date] = None) -> dict:
    """Validate appointment fields and return the cleaned values.

    With ``partial`` only the fields present are checked (used for
    patches); otherwise every required field must be there.
    """
    cleaned = {}
    for name in APPOINTMENT_FIELDS:
        if name not in fields:
            if partial or name == "notes":
                continue
            raise ValidationError(name, f"{name} is required")

        value = fields[name]
        if name == "full_name":
            cleaned[name] = validate_full_name(value)
        elif name == "service_type":
            cleaned[name] = validate_service_type(value)
        elif name == "appointment_date":
            cleaned[name] = validate_appointment_date(value, today=today)
        elif name == "appointment_time":
            cleaned[name] = validate_appointment_time(value)
        else:
            cleaned[name] = validate_notes(value)
    return cleaned


def validate_review(rating, comment) -> tuple:
    # bool is an int subclass; a checkbox value is not a rating
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError("rating", "Please select a rating between 1 and 5")
    if comment is None or comment == "":
        return rating, None
    if not isinstance(comment, str) or len(comment) > COMMENT_MAX_LENGTH:
        raise ValidationError("comment", "Comment must be less than 500 characters")
    return rating, comment
