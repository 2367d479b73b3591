"""Domain Enums"""
from enum import Enum


class ReservationStatus(str, Enum):
    PRELIMINARY = "preliminary"
    DEPOSIT_PAID = "deposit_paid"
    CONFIRMED = "confirmed"
    BOOKING = "booking"
    PAST = "past"


DEFAULT_RESERVATION_STATUS = ReservationStatus.PRELIMINARY
