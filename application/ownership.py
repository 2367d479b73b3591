"""Ownership resolution for property/room pairs"""
from typing import Tuple
from uuid import UUID

from domain.entities import Property, Room
from domain.errors import NotFoundError, CrossReferenceError
from domain.repositories import PropertyRepository, RoomRepository


class OwnershipResolver:
    """Read-only checks that referenced entities belong to the requesting owner.

    Entities owned by someone else are reported exactly like missing ones.
    """

    def __init__(self, property_repo: PropertyRepository, room_repo: RoomRepository):
        self.property_repo = property_repo
        self.room_repo = room_repo

    async def ensure_property(self, owner_id: UUID, property_id: UUID) -> Property:
        prop = await self.property_repo.find_by_id(owner_id, property_id)
        if prop is None:
            raise NotFoundError("Property not found.")
        return prop

    async def ensure_room(self, owner_id: UUID, room_id: UUID) -> Room:
        room = await self.room_repo.find_by_id(owner_id, room_id)
        if room is None:
            raise NotFoundError("Room not found.")
        return room

    async def resolve(self, owner_id: UUID, property_id: UUID, room_id: UUID) -> Tuple[Property, Room]:
        """Confirm property and room are owned and that the room sits in the property"""
        prop = await self.ensure_property(owner_id, property_id)
        room = await self.ensure_room(owner_id, room_id)
        if room.property_id != prop.id:
            raise CrossReferenceError("Room does not belong to the selected property.")
        return prop, room
