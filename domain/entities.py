"""Domain Entities - Properties, Rooms and Reservations"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from datetime import datetime, date, timezone
from typing import Optional
from decimal import Decimal

from domain.enums import ReservationStatus, DEFAULT_RESERVATION_STATUS
from domain.value_objects import DateRange, PropertySummary, RoomSummary


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_room_name(name: str) -> str:
    """Key used for room-name uniqueness within a property"""
    return name.strip().casefold()


class Property(BaseModel):
    """Property owned by exactly one tenant"""

    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)

    class Config:
        from_attributes = True

    def summary(self) -> PropertySummary:
        return PropertySummary(id=self.id, name=self.name)


class Room(BaseModel):
    """Room inside a property; the name is unique per (owner, property)"""

    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    property_id: UUID
    name: str
    created_at: datetime = Field(default_factory=_utcnow)

    class Config:
        from_attributes = True

    def name_key(self) -> str:
        return normalize_room_name(self.name)

    def summary(self) -> RoomSummary:
        return RoomSummary(id=self.id, name=self.name, property_id=self.property_id)


class Reservation(BaseModel):
    """Guest stay in one room over the half-open interval [start_date, end_date)"""

    # Identity & scope
    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    property_id: UUID
    room_id: UUID

    # Guest
    name: str
    lastname: str
    phone: Optional[str] = None
    mail: Optional[str] = None

    # Stay
    start_date: date
    end_date: date
    adults: Optional[int] = None
    children: Optional[int] = None
    notes: Optional[str] = None

    # Pricing
    nightly_rate: Optional[Decimal] = None
    total_price: Optional[Decimal] = None

    status: ReservationStatus = DEFAULT_RESERVATION_STATUS

    # Metadata
    created_at: datetime = Field(default_factory=_utcnow)
    modified_at: datetime = Field(default_factory=_utcnow)

    class Config:
        from_attributes = True

    @property
    def date_range(self) -> DateRange:
        return DateRange(start_date=self.start_date, end_date=self.end_date)

    def get_nights(self) -> int:
        return self.date_range.nights()


class ReservationDetails(BaseModel):
    """Reservation row joined with its room and property summaries"""

    reservation: Reservation
    room_summary: Optional[RoomSummary] = None
    property_summary: Optional[PropertySummary] = None
