"""Domain Repository Interfaces

All reads and writes are scoped by ``owner_id``. Implementations signal
persistence failures (constraint violations, ambiguous single-row fetches)
by raising ``domain.errors.StoreError``.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, List
from uuid import UUID
from datetime import date

from domain.entities import Property, Room, Reservation, ReservationDetails


class PropertyRepository(ABC):
    """Repository interface for Property"""

    @abstractmethod
    async def save(self, prop: Property) -> Property:
        """Insert property"""
        pass

    @abstractmethod
    async def find_by_id(self, owner_id: UUID, property_id: UUID) -> Optional[Property]:
        """Fetch zero or one property"""
        pass

    @abstractmethod
    async def find_all(self, owner_id: UUID) -> List[Property]:
        """List properties in creation order"""
        pass

    @abstractmethod
    async def update(self, owner_id: UUID, property_id: UUID, changes: Dict[str, Any]) -> Optional[Property]:
        """Conditional update; None when no row matches id+owner"""
        pass

    @abstractmethod
    async def delete(self, owner_id: UUID, property_id: UUID) -> bool:
        """Delete property, cascading to its rooms and reservations"""
        pass


class RoomRepository(ABC):
    """Repository interface for Room"""

    @abstractmethod
    async def save(self, room: Room) -> Room:
        """Insert room"""
        pass

    @abstractmethod
    async def find_by_id(self, owner_id: UUID, room_id: UUID) -> Optional[Room]:
        """Fetch zero or one room"""
        pass

    @abstractmethod
    async def find_all(self, owner_id: UUID, property_id: Optional[UUID] = None) -> List[Room]:
        """List rooms in creation order, optionally for one property"""
        pass

    @abstractmethod
    async def update(self, owner_id: UUID, room_id: UUID, changes: Dict[str, Any]) -> Optional[Room]:
        """Conditional update; None when no row matches id+owner.

        Moving the room to another property carries its reservations'
        ``property_id`` along in the same write.
        """
        pass

    @abstractmethod
    async def delete(self, owner_id: UUID, room_id: UUID) -> bool:
        """Delete room, cascading to its reservations"""
        pass


class ReservationRepository(ABC):
    """Repository interface for Reservation"""

    @abstractmethod
    async def save(self, reservation: Reservation) -> ReservationDetails:
        """Insert reservation and return it joined with room/property"""
        pass

    @abstractmethod
    async def find_by_id(self, owner_id: UUID, reservation_id: UUID) -> Optional[ReservationDetails]:
        """Fetch zero or one reservation"""
        pass

    @abstractmethod
    async def find_all(
        self,
        owner_id: UUID,
        lastname_prefix: Optional[str] = None,
        start_date_from: Optional[date] = None,
        property_id: Optional[UUID] = None
    ) -> List[ReservationDetails]:
        """List reservations ordered by start date"""
        pass

    @abstractmethod
    async def find_overlapping(
        self,
        owner_id: UUID,
        room_id: UUID,
        start_date: date,
        end_date: date,
        exclude_id: Optional[UUID] = None
    ) -> List[Reservation]:
        """Reservations of the room with start_date < end_date and end_date > start_date"""
        pass

    @abstractmethod
    async def update(
        self, owner_id: UUID, reservation_id: UUID, changes: Dict[str, Any]
    ) -> Optional[ReservationDetails]:
        """Conditional update; None when no row matches id+owner"""
        pass

    @abstractmethod
    async def delete(self, owner_id: UUID, reservation_id: UUID) -> bool:
        """Delete reservation"""
        pass
