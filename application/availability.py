"""Room availability checks"""
import logging
from typing import List, Optional
from uuid import UUID

from domain.entities import Reservation
from domain.errors import ConflictError
from domain.repositories import ReservationRepository
from domain.value_objects import DateRange

logger = logging.getLogger(__name__)

ROOM_BOOKED_MESSAGE = "Room is already booked for the selected dates."


class AvailabilityChecker:
    """Detects reservations of a room that overlap a proposed stay.

    Intervals are half-open, so a stay ending on the day another begins is
    not a conflict. Passing ``exclude_reservation_id`` leaves a reservation's
    own row out of the scan when its dates are being changed.
    """

    def __init__(self, repository: ReservationRepository):
        self.repository = repository

    async def find_conflicts(
        self,
        owner_id: UUID,
        room_id: UUID,
        date_range: DateRange,
        exclude_reservation_id: Optional[UUID] = None
    ) -> List[Reservation]:
        candidates = await self.repository.find_overlapping(
            owner_id,
            room_id,
            date_range.start_date,
            date_range.end_date,
            exclude_id=exclude_reservation_id
        )
        return [
            r for r in candidates
            if r.id != exclude_reservation_id and r.date_range.overlaps(date_range)
        ]

    async def is_available(
        self,
        owner_id: UUID,
        room_id: UUID,
        date_range: DateRange,
        exclude_reservation_id: Optional[UUID] = None
    ) -> bool:
        conflicts = await self.find_conflicts(owner_id, room_id, date_range, exclude_reservation_id)
        return not conflicts

    async def ensure_available(
        self,
        owner_id: UUID,
        room_id: UUID,
        date_range: DateRange,
        exclude_reservation_id: Optional[UUID] = None
    ) -> None:
        conflicts = await self.find_conflicts(owner_id, room_id, date_range, exclude_reservation_id)
        if conflicts:
            logger.info(
                "Room %s unavailable for %s..%s (%d overlapping reservation(s))",
                room_id, date_range.start_date, date_range.end_date, len(conflicts)
            )
            raise ConflictError(ROOM_BOOKED_MESSAGE)
