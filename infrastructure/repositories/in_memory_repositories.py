"""In-Memory Repository Implementations

``InMemoryDatabase`` plays the part of the relational store: it owns the three
tables, enforces the storage-level constraints (room-name uniqueness and
per-room date exclusion) and performs the delete cascades.
"""
from typing import Any, Dict, Optional, List
from uuid import UUID
from datetime import date, datetime, timezone

from domain.entities import Property, Room, Reservation, ReservationDetails
from domain.errors import (
    StoreError, UNIQUE_VIOLATION, EXCLUSION_VIOLATION,
    ROOM_NAME_CONSTRAINT, RESERVATION_OVERLAP_CONSTRAINT
)
from domain.repositories import PropertyRepository, RoomRepository, ReservationRepository


class InMemoryDatabase:
    """Tables shared by the in-memory repositories"""

    def __init__(self):
        self.properties: Dict[UUID, Property] = {}
        self.rooms: Dict[UUID, Room] = {}
        self.reservations: Dict[UUID, Reservation] = {}

    # ==================== CONSTRAINTS ====================
    def check_room_name(self, room: Room) -> None:
        for other in self.rooms.values():
            if (
                other.id != room.id
                and other.owner_id == room.owner_id
                and other.property_id == room.property_id
                and other.name_key() == room.name_key()
            ):
                raise StoreError(
                    f'duplicate key value violates unique constraint "{ROOM_NAME_CONSTRAINT}"',
                    code=UNIQUE_VIOLATION,
                    constraint=ROOM_NAME_CONSTRAINT
                )

    def check_reservation_overlap(self, reservation: Reservation) -> None:
        for other in self.reservations.values():
            if (
                other.id != reservation.id
                and other.owner_id == reservation.owner_id
                and other.room_id == reservation.room_id
                and other.date_range.overlaps(reservation.date_range)
            ):
                raise StoreError(
                    f'conflicting key value violates exclusion constraint "{RESERVATION_OVERLAP_CONSTRAINT}"',
                    code=EXCLUSION_VIOLATION,
                    constraint=RESERVATION_OVERLAP_CONSTRAINT
                )

    # ==================== CASCADES ====================
    def delete_room_cascade(self, room_id: UUID) -> None:
        self.rooms.pop(room_id, None)
        for reservation_id in [r.id for r in self.reservations.values() if r.room_id == room_id]:
            del self.reservations[reservation_id]

    def delete_property_cascade(self, property_id: UUID) -> None:
        # Reservations go with their rooms; a reservation belongs to a property only through its room
        self.properties.pop(property_id, None)
        for room_id in [r.id for r in self.rooms.values() if r.property_id == property_id]:
            self.delete_room_cascade(room_id)

    def move_room_reservations(self, room_id: UUID, property_id: UUID) -> None:
        for reservation in [r for r in self.reservations.values() if r.room_id == room_id]:
            self.reservations[reservation.id] = reservation.model_copy(
                update={"property_id": property_id}
            )


def _owned(row: Any, owner_id: UUID) -> bool:
    return row is not None and row.owner_id == owner_id


class InMemoryPropertyRepository(PropertyRepository):
    """In-memory implementation of PropertyRepository"""

    def __init__(self, db: InMemoryDatabase):
        self._db = db

    async def save(self, prop: Property) -> Property:
        self._db.properties[prop.id] = prop
        return prop

    async def find_by_id(self, owner_id: UUID, property_id: UUID) -> Optional[Property]:
        prop = self._db.properties.get(property_id)
        return prop if _owned(prop, owner_id) else None

    async def find_all(self, owner_id: UUID) -> List[Property]:
        rows = [p for p in self._db.properties.values() if p.owner_id == owner_id]
        return sorted(rows, key=lambda p: p.created_at)

    async def update(self, owner_id: UUID, property_id: UUID, changes: Dict[str, Any]) -> Optional[Property]:
        prop = await self.find_by_id(owner_id, property_id)
        if prop is None:
            return None
        updated = prop.model_copy(update=changes)
        self._db.properties[property_id] = updated
        return updated

    async def delete(self, owner_id: UUID, property_id: UUID) -> bool:
        if await self.find_by_id(owner_id, property_id) is None:
            return False
        self._db.delete_property_cascade(property_id)
        return True


class InMemoryRoomRepository(RoomRepository):
    """In-memory implementation of RoomRepository"""

    def __init__(self, db: InMemoryDatabase):
        self._db = db

    async def save(self, room: Room) -> Room:
        self._db.check_room_name(room)
        self._db.rooms[room.id] = room
        return room

    async def find_by_id(self, owner_id: UUID, room_id: UUID) -> Optional[Room]:
        room = self._db.rooms.get(room_id)
        return room if _owned(room, owner_id) else None

    async def find_all(self, owner_id: UUID, property_id: Optional[UUID] = None) -> List[Room]:
        rows = [
            r for r in self._db.rooms.values()
            if r.owner_id == owner_id and (property_id is None or r.property_id == property_id)
        ]
        return sorted(rows, key=lambda r: r.created_at)

    async def update(self, owner_id: UUID, room_id: UUID, changes: Dict[str, Any]) -> Optional[Room]:
        room = await self.find_by_id(owner_id, room_id)
        if room is None:
            return None
        updated = room.model_copy(update=changes)
        self._db.check_room_name(updated)
        self._db.rooms[room_id] = updated
        if updated.property_id != room.property_id:
            self._db.move_room_reservations(room_id, updated.property_id)
        return updated

    async def delete(self, owner_id: UUID, room_id: UUID) -> bool:
        if await self.find_by_id(owner_id, room_id) is None:
            return False
        self._db.delete_room_cascade(room_id)
        return True


class InMemoryReservationRepository(ReservationRepository):
    """In-memory implementation of ReservationRepository"""

    def __init__(self, db: InMemoryDatabase):
        self._db = db

    def _join(self, reservation: Reservation) -> ReservationDetails:
        room = self._db.rooms.get(reservation.room_id)
        prop = self._db.properties.get(reservation.property_id)
        return ReservationDetails(
            reservation=reservation,
            room_summary=room.summary() if room else None,
            property_summary=prop.summary() if prop else None
        )

    async def save(self, reservation: Reservation) -> ReservationDetails:
        self._db.check_reservation_overlap(reservation)
        self._db.reservations[reservation.id] = reservation
        return self._join(reservation)

    async def find_by_id(self, owner_id: UUID, reservation_id: UUID) -> Optional[ReservationDetails]:
        reservation = self._db.reservations.get(reservation_id)
        return self._join(reservation) if _owned(reservation, owner_id) else None

    async def find_all(
        self,
        owner_id: UUID,
        lastname_prefix: Optional[str] = None,
        start_date_from: Optional[date] = None,
        property_id: Optional[UUID] = None
    ) -> List[ReservationDetails]:
        rows = [r for r in self._db.reservations.values() if r.owner_id == owner_id]
        if lastname_prefix:
            prefix = lastname_prefix.casefold()
            rows = [r for r in rows if r.lastname.casefold().startswith(prefix)]
        if start_date_from:
            rows = [r for r in rows if r.start_date >= start_date_from]
        if property_id:
            rows = [r for r in rows if r.property_id == property_id]
        rows.sort(key=lambda r: r.start_date)
        return [self._join(r) for r in rows]

    async def find_overlapping(
        self,
        owner_id: UUID,
        room_id: UUID,
        start_date: date,
        end_date: date,
        exclude_id: Optional[UUID] = None
    ) -> List[Reservation]:
        return [
            r for r in self._db.reservations.values()
            if r.owner_id == owner_id
            and r.room_id == room_id
            and r.start_date < end_date
            and r.end_date > start_date
            and (exclude_id is None or r.id != exclude_id)
        ]

    async def update(
        self, owner_id: UUID, reservation_id: UUID, changes: Dict[str, Any]
    ) -> Optional[ReservationDetails]:
        reservation = self._db.reservations.get(reservation_id)
        if not _owned(reservation, owner_id):
            return None
        updated = reservation.model_copy(
            update={**changes, "modified_at": datetime.now(timezone.utc)}
        )
        self._db.check_reservation_overlap(updated)
        self._db.reservations[reservation_id] = updated
        return self._join(updated)

    async def delete(self, owner_id: UUID, reservation_id: UUID) -> bool:
        reservation = self._db.reservations.get(reservation_id)
        if not _owned(reservation, owner_id):
            return False
        del self._db.reservations[reservation_id]
        return True
