"""Domain Value Objects"""
from pydantic import BaseModel, field_validator, ValidationInfo
from datetime import date, datetime, time, timezone
from typing import Any
from uuid import UUID


def to_utc_date(value: Any) -> date:
    """Reduce a date, datetime or ISO-8601 string to its UTC calendar day.

    Naive datetimes are read as UTC. Raises ValueError when the value cannot
    be understood as a date.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        return value
    elif isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        moment = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported date value: {value!r}")

    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def utc_midnight(day: date) -> datetime:
    """Start of the given calendar day as an aware UTC instant"""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class DateRange(BaseModel):
    """Half-open stay interval [start_date, end_date)"""
    start_date: date
    end_date: date

    @field_validator('end_date')
    @classmethod
    def end_after_start(cls, v: date, info: ValidationInfo) -> date:
        start = info.data.get('start_date')
        if start is not None and v <= start:
            raise ValueError('End date must be after the start date.')
        return v

    def nights(self) -> int:
        """Whole nights between the two UTC calendar days"""
        delta = utc_midnight(self.end_date) - utc_midnight(self.start_date)
        return int(delta.total_seconds() // 86400)

    def overlaps(self, other: "DateRange") -> bool:
        # Touching endpoints (checkout day == checkin day) do not overlap
        return self.start_date < other.end_date and other.start_date < self.end_date

    class Config:
        frozen = True


class PropertySummary(BaseModel):
    """Property fields joined onto a reservation"""
    id: UUID
    name: str

    class Config:
        frozen = True


class RoomSummary(BaseModel):
    """Room fields joined onto a reservation"""
    id: UUID
    name: str
    property_id: UUID

    class Config:
        frozen = True
