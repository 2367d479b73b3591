"""Domain Errors

Every error raised by the core carries the status code the boundary should
answer with. ``StoreError`` is the raw signal coming out of persistence and is
translated by the application services before it reaches a caller.
"""
from typing import Optional


UNIQUE_VIOLATION = "23505"
EXCLUSION_VIOLATION = "23P01"

ROOM_NAME_CONSTRAINT = "rooms_owner_property_name_key"
RESERVATION_OVERLAP_CONSTRAINT = "reservations_room_no_overlap"


class ReservationSystemError(Exception):
    """Base class for errors surfaced to callers"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReservationSystemError, ValueError):
    """Malformed, missing or out-of-range input"""
    status_code = 400


class CrossReferenceError(ValidationError):
    """Room does not belong to the property it was submitted with"""


class NotFoundError(ReservationSystemError):
    """Entity absent or owned by someone else"""
    status_code = 404


class ConflictError(ReservationSystemError):
    """Date-range overlap or room name already taken"""
    status_code = 409


class UnexpectedStoreError(ReservationSystemError):
    """Unclassified persistence failure"""
    status_code = 500


class StoreError(Exception):
    """Low-level failure reported by the data store"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        constraint: Optional[str] = None,
        status: Optional[int] = None
    ):
        super().__init__(message)
        self.code = code
        self.constraint = constraint
        self.status = status

    def is_constraint_violation(self, constraint: str) -> bool:
        return (
            self.code in (UNIQUE_VIOLATION, EXCLUSION_VIOLATION)
            and self.constraint == constraint
        )
