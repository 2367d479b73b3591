"""API Schemas - Response DTOs

Write endpoints take untyped JSON bodies that go through
``application.validators``; only responses are modelled here.
"""
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import Optional


# ============================================================================
# PROPERTY & ROOM SCHEMAS
# ============================================================================

class PropertyResponse(BaseModel):
    """Property response DTO"""
    id: UUID
    owner_id: UUID
    name: str
    description: Optional[str] = None
    created_at: datetime


class RoomResponse(BaseModel):
    """Room response DTO"""
    id: UUID
    owner_id: UUID
    property_id: UUID
    name: str
    created_at: datetime


class RoomAvailabilityResponse(BaseModel):
    """Room availability response DTO"""
    room_id: UUID
    start_date: date
    end_date: date
    nights: int
    available: bool


# ============================================================================
# RESERVATION SCHEMAS
# ============================================================================

class RoomSummaryResponse(BaseModel):
    id: UUID
    name: str
    property_id: UUID


class PropertySummaryResponse(BaseModel):
    id: UUID
    name: str


class ReservationResponse(BaseModel):
    """Reservation response DTO, joined with room and property"""
    id: UUID
    owner_id: UUID
    property_id: UUID
    room_id: UUID
    name: str
    lastname: str
    phone: Optional[str] = None
    mail: Optional[str] = None
    start_date: date
    end_date: date
    nightly_rate: Optional[Decimal] = None
    total_price: Optional[Decimal] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    notes: Optional[str] = None
    status: str
    created_at: datetime
    modified_at: datetime
    room: Optional[RoomSummaryResponse] = None
    property: Optional[PropertySummaryResponse] = None
    computed_status: str = Field(alias="computedStatus")
    is_past: bool = Field(alias="isPast")

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    """Confirmation message DTO"""
    message: str


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str


class OwnerResponse(BaseModel):
    """Authenticated owner DTO"""
    id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    disabled: bool
