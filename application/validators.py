"""Payload validators

Turn untyped request bodies into normalized drafts or raise a
``ValidationError`` describing the first violated constraint. Missing required
fields are collected and reported together.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional
from uuid import UUID

from pydantic import BaseModel

from domain.enums import ReservationStatus
from domain.errors import ValidationError
from domain.value_objects import to_utc_date

RESERVATION_REQUIRED_FIELDS = ("name", "lastname", "start_date", "end_date", "property_id", "room_id")
ROOM_REQUIRED_FIELDS = ("property_id", "name")
PROPERTY_REQUIRED_FIELDS = ("name",)

MAX_NOTES_LENGTH = 1000
# Keeps rate x nights well inside the default 28-digit decimal context
MAX_NUMBER = Decimal("1000000000")

MAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[0-9\s\-()]{6,25}$")
PHONE_MIN_DIGITS = 6
PHONE_MAX_DIGITS = 15


class ReservationDraft(BaseModel):
    """Normalized reservation submission"""
    name: str
    lastname: str
    phone: Optional[str] = None
    mail: Optional[str] = None
    start_date: date
    end_date: date
    property_id: UUID
    room_id: UUID
    nightly_rate: Optional[Decimal] = None
    total_price: Optional[Decimal] = None
    # Accepted on input only, folded into total_price by the pricing resolver
    price: Optional[Decimal] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    notes: Optional[str] = None
    status: Optional[ReservationStatus] = None


class RoomDraft(BaseModel):
    property_id: UUID
    name: str


class PropertyDraft(BaseModel):
    name: str
    description: Optional[str] = None


# ==================== FIELD HELPERS ====================

def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _require_object(payload: Any, label: str) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError(f"Invalid {label} payload.")
    return payload


def _check_required(payload: dict, fields: Iterable[str]) -> None:
    missing: List[str] = [field for field in fields if _is_blank(payload.get(field))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}.")


def _optional_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def _identifier(value: Any, field: str) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        raise ValidationError(f'Field "{field}" must be a valid identifier.')


def _non_negative_decimal(value: Any, field: str) -> Optional[Decimal]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f'Field "{field}" must be a non-negative number.')
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f'Field "{field}" must be a non-negative number.')
    if not number.is_finite() or number < 0:
        raise ValidationError(f'Field "{field}" must be a non-negative number.')
    if number > MAX_NUMBER:
        raise ValidationError(f'Field "{field}" must be at most {MAX_NUMBER}.')
    return number


def _non_negative_count(value: Any, field: str) -> Optional[int]:
    number = _non_negative_decimal(value, field)
    if number is None:
        return None
    if number != number.to_integral_value():
        raise ValidationError(f'Field "{field}" must be a whole number.')
    return int(number)


def normalize_phone(value: Any) -> Optional[str]:
    raw = _optional_string(value)
    if raw is None:
        return None
    if not PHONE_PATTERN.match(raw):
        raise ValidationError("Invalid phone number.")
    digits = re.sub(r"\D", "", raw)
    if not PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS:
        raise ValidationError("Invalid phone number.")
    return f"+{digits}" if raw.startswith("+") else digits


def normalize_mail(value: Any) -> Optional[str]:
    mail = _optional_string(value)
    if mail is None:
        return None
    if not MAIL_PATTERN.match(mail):
        raise ValidationError("Invalid email address.")
    return mail


def normalize_notes(value: Any) -> Optional[str]:
    notes = _optional_string(value)
    if notes is not None and len(notes) > MAX_NOTES_LENGTH:
        raise ValidationError(f'Field "notes" must be at most {MAX_NOTES_LENGTH} characters.')
    return notes


def normalize_status(value: Any) -> Optional[ReservationStatus]:
    if _is_blank(value):
        return None
    candidate = str(value).strip()
    try:
        return ReservationStatus(candidate)
    except ValueError:
        raise ValidationError(f'Invalid status "{value}".')


# ==================== VALIDATORS ====================

def validate_reservation_payload(payload: Any) -> ReservationDraft:
    """Validate and normalize a reservation submission"""
    data = _require_object(payload, "reservation")
    _check_required(data, RESERVATION_REQUIRED_FIELDS)

    try:
        start_date = to_utc_date(data["start_date"])
        end_date = to_utc_date(data["end_date"])
    except ValueError:
        raise ValidationError("Invalid reservation dates.")

    if end_date <= start_date:
        raise ValidationError("End date must be after the start date.")

    return ReservationDraft(
        name=str(data["name"]).strip(),
        lastname=str(data["lastname"]).strip(),
        phone=normalize_phone(data.get("phone")),
        mail=normalize_mail(data.get("mail")),
        start_date=start_date,
        end_date=end_date,
        property_id=_identifier(data["property_id"], "property_id"),
        room_id=_identifier(data["room_id"], "room_id"),
        nightly_rate=_non_negative_decimal(data.get("nightly_rate"), "nightly_rate"),
        total_price=_non_negative_decimal(data.get("total_price"), "total_price"),
        price=_non_negative_decimal(data.get("price"), "price"),
        adults=_non_negative_count(data.get("adults"), "adults"),
        children=_non_negative_count(data.get("children"), "children"),
        notes=normalize_notes(data.get("notes")),
        status=normalize_status(data.get("status")),
    )


def validate_room_payload(payload: Any) -> RoomDraft:
    data = _require_object(payload, "room")
    _check_required(data, ROOM_REQUIRED_FIELDS)
    return RoomDraft(
        property_id=_identifier(data["property_id"], "property_id"),
        name=str(data["name"]).strip(),
    )


def validate_property_payload(payload: Any) -> PropertyDraft:
    data = _require_object(payload, "property")
    _check_required(data, PROPERTY_REQUIRED_FIELDS)
    return PropertyDraft(
        name=str(data["name"]).strip(),
        description=_optional_string(data.get("description")),
    )
