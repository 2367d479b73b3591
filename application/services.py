"""Application Services - Business use cases"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from application.availability import AvailabilityChecker, ROOM_BOOKED_MESSAGE
from application.ownership import OwnershipResolver
from application.pricing import count_nights, resolve_total_price
from application.status import Clock, ReservationView, utc_now, with_computed_status
from application.validators import (
    validate_property_payload, validate_reservation_payload, validate_room_payload
)
from domain.entities import Property, Room, Reservation, normalize_room_name
from domain.enums import DEFAULT_RESERVATION_STATUS
from domain.errors import (
    ConflictError, NotFoundError, ReservationSystemError, StoreError, UnexpectedStoreError,
    ROOM_NAME_CONSTRAINT, RESERVATION_OVERLAP_CONSTRAINT
)
from domain.repositories import PropertyRepository, RoomRepository, ReservationRepository
from domain.value_objects import DateRange

logger = logging.getLogger(__name__)

NOT_ACCEPTABLE = 406


def room_name_taken_message(name: str) -> str:
    return f'A room named "{name}" already exists in this property.'


def translate_store_error(
    error: StoreError,
    conflict_messages: Optional[Dict[str, str]] = None,
    not_found_message: str = "Not found."
) -> ReservationSystemError:
    """Map a raw store failure onto the error a pre-check would have raised"""
    for constraint, message in (conflict_messages or {}).items():
        if error.is_constraint_violation(constraint):
            logger.warning("Store rejected write on %s", constraint)
            return ConflictError(message)
    if error.status == NOT_ACCEPTABLE:
        return NotFoundError(not_found_message)
    logger.error("Unexpected store failure: %s (code=%s)", error, error.code, exc_info=error)
    return UnexpectedStoreError("Unexpected storage error.")


class PropertyService:
    """Service for Property use cases"""

    def __init__(self, repository: PropertyRepository):
        self.repository = repository

    async def list_properties(self, owner_id: UUID) -> List[Property]:
        try:
            return await self.repository.find_all(owner_id)
        except StoreError as e:
            raise translate_store_error(e) from e

    async def get_property(self, owner_id: UUID, property_id: UUID) -> Property:
        not_found = f"Property with ID {property_id} not found."
        try:
            prop = await self.repository.find_by_id(owner_id, property_id)
        except StoreError as e:
            raise translate_store_error(e, not_found_message=not_found) from e
        if prop is None:
            raise NotFoundError(not_found)
        return prop

    async def create_property(self, owner_id: UUID, payload: Any) -> Property:
        draft = validate_property_payload(payload)
        try:
            prop = await self.repository.save(
                Property(owner_id=owner_id, name=draft.name, description=draft.description)
            )
        except StoreError as e:
            raise translate_store_error(e) from e
        logger.info("Created property %s for owner %s", prop.id, owner_id)
        return prop

    async def update_property(self, owner_id: UUID, property_id: UUID, payload: Any) -> Property:
        draft = validate_property_payload(payload)
        not_found = f"Property with ID {property_id} not found."
        try:
            prop = await self.repository.update(owner_id, property_id, draft.model_dump())
        except StoreError as e:
            raise translate_store_error(e, not_found_message=not_found) from e
        if prop is None:
            raise NotFoundError(not_found)
        logger.info("Updated property %s for owner %s", property_id, owner_id)
        return prop

    async def delete_property(self, owner_id: UUID, property_id: UUID) -> Dict[str, str]:
        try:
            if await self.repository.find_by_id(owner_id, property_id) is None:
                raise NotFoundError("Not found.")
            await self.repository.delete(owner_id, property_id)
        except StoreError as e:
            raise translate_store_error(e) from e
        logger.info("Deleted property %s for owner %s", property_id, owner_id)
        return {"message": "Property deleted successfully."}


class RoomAvailability(BaseModel):
    room_id: UUID
    start_date: date
    end_date: date
    nights: int
    available: bool


class RoomService:
    """Service for Room use cases.

    Name uniqueness is checked here for a readable error and enforced again
    by the store's unique constraint.
    """

    def __init__(
        self,
        repository: RoomRepository,
        ownership: OwnershipResolver,
        availability: AvailabilityChecker
    ):
        self.repository = repository
        self.ownership = ownership
        self.availability = availability

    async def _ensure_unique_name(
        self,
        owner_id: UUID,
        property_id: UUID,
        name: str,
        exclude_room_id: Optional[UUID] = None
    ) -> None:
        key = normalize_room_name(name)
        siblings = await self.repository.find_all(owner_id, property_id=property_id)
        for room in siblings:
            if room.id != exclude_room_id and room.name_key() == key:
                raise ConflictError(room_name_taken_message(name))

    async def list_rooms(self, owner_id: UUID, property_id: Optional[UUID] = None) -> List[Room]:
        try:
            return await self.repository.find_all(owner_id, property_id=property_id)
        except StoreError as e:
            raise translate_store_error(e) from e

    async def get_room(self, owner_id: UUID, room_id: UUID) -> Room:
        not_found = f"Room with ID {room_id} not found."
        try:
            room = await self.repository.find_by_id(owner_id, room_id)
        except StoreError as e:
            raise translate_store_error(e, not_found_message=not_found) from e
        if room is None:
            raise NotFoundError(not_found)
        return room

    async def create_room(self, owner_id: UUID, payload: Any) -> Room:
        draft = validate_room_payload(payload)
        conflicts = {ROOM_NAME_CONSTRAINT: room_name_taken_message(draft.name)}
        try:
            await self.ownership.ensure_property(owner_id, draft.property_id)
            await self._ensure_unique_name(owner_id, draft.property_id, draft.name)
            room = await self.repository.save(
                Room(owner_id=owner_id, property_id=draft.property_id, name=draft.name)
            )
        except StoreError as e:
            raise translate_store_error(e, conflicts, "Property not found.") from e
        logger.info("Created room %s in property %s for owner %s", room.id, room.property_id, owner_id)
        return room

    async def update_room(self, owner_id: UUID, room_id: UUID, payload: Any) -> Room:
        """Rename the room or move it to another of the owner's properties"""
        draft = validate_room_payload(payload)
        conflicts = {ROOM_NAME_CONSTRAINT: room_name_taken_message(draft.name)}
        not_found = f"Room with ID {room_id} not found."
        try:
            if await self.repository.find_by_id(owner_id, room_id) is None:
                raise NotFoundError(not_found)
            await self.ownership.ensure_property(owner_id, draft.property_id)
            await self._ensure_unique_name(
                owner_id, draft.property_id, draft.name, exclude_room_id=room_id
            )
            room = await self.repository.update(owner_id, room_id, draft.model_dump())
        except StoreError as e:
            raise translate_store_error(e, conflicts, not_found) from e
        if room is None:
            raise NotFoundError(not_found)
        logger.info("Updated room %s for owner %s", room_id, owner_id)
        return room

    async def delete_room(self, owner_id: UUID, room_id: UUID) -> Dict[str, str]:
        try:
            if await self.repository.find_by_id(owner_id, room_id) is None:
                raise NotFoundError("Not found.")
            await self.repository.delete(owner_id, room_id)
        except StoreError as e:
            raise translate_store_error(e) from e
        logger.info("Deleted room %s for owner %s", room_id, owner_id)
        return {"message": "Room deleted successfully."}

    async def check_availability(
        self,
        owner_id: UUID,
        room_id: UUID,
        start_date: date,
        end_date: date,
        exclude_reservation_id: Optional[UUID] = None
    ) -> RoomAvailability:
        """Report whether the room is free for the stay without writing anything"""
        nights = count_nights(start_date, end_date)
        date_range = DateRange(start_date=start_date, end_date=end_date)
        try:
            await self.ownership.ensure_room(owner_id, room_id)
            available = await self.availability.is_available(
                owner_id, room_id, date_range, exclude_reservation_id
            )
        except StoreError as e:
            raise translate_store_error(e, not_found_message="Room not found.") from e
        return RoomAvailability(
            room_id=room_id,
            start_date=start_date,
            end_date=end_date,
            nights=nights,
            available=available
        )


class ReservationService:
    """Service for Reservation use cases.

    Writes run validate -> ownership -> availability -> pricing -> persist.
    The availability pre-check and the write are not atomic; the store's
    exclusion constraint catches the race and is reported as the same
    ConflictError.
    """

    def __init__(
        self,
        repository: ReservationRepository,
        ownership: OwnershipResolver,
        availability: AvailabilityChecker,
        clock: Clock = utc_now
    ):
        self.repository = repository
        self.ownership = ownership
        self.availability = availability
        self.clock = clock

    def _present(self, details) -> ReservationView:
        return with_computed_status([details], self.clock)[0]

    async def list_reservations(
        self,
        owner_id: UUID,
        lastname: Optional[str] = None,
        start_date: Optional[date] = None,
        property_id: Optional[UUID] = None
    ) -> List[ReservationView]:
        try:
            rows = await self.repository.find_all(
                owner_id,
                lastname_prefix=lastname.strip() if lastname else None,
                start_date_from=start_date,
                property_id=property_id
            )
        except StoreError as e:
            raise translate_store_error(e) from e
        return with_computed_status(rows, self.clock)

    async def get_reservation(self, owner_id: UUID, reservation_id: UUID) -> ReservationView:
        not_found = f"Reservation with ID {reservation_id} not found."
        try:
            details = await self.repository.find_by_id(owner_id, reservation_id)
        except StoreError as e:
            raise translate_store_error(e, not_found_message=not_found) from e
        if details is None:
            raise NotFoundError(not_found)
        return self._present(details)

    async def _prepare(
        self, owner_id: UUID, payload: Any, exclude_reservation_id: Optional[UUID] = None
    ) -> Dict[str, Any]:
        """Validate a submission and run every pre-write check; returns the row values"""
        draft = validate_reservation_payload(payload)
        prop, room = await self.ownership.resolve(owner_id, draft.property_id, draft.room_id)

        date_range = DateRange(start_date=draft.start_date, end_date=draft.end_date)
        await self.availability.ensure_available(
            owner_id, room.id, date_range, exclude_reservation_id=exclude_reservation_id
        )

        nights = count_nights(draft.start_date, draft.end_date)
        values = draft.model_dump(exclude={"price", "status"})
        values.update(
            property_id=prop.id,
            room_id=room.id,
            total_price=resolve_total_price(
                nights,
                nightly_rate=draft.nightly_rate,
                total_price=draft.total_price,
                price=draft.price
            )
        )
        if draft.status is not None:
            values["status"] = draft.status
        return values

    async def create_reservation(self, owner_id: UUID, payload: Any) -> ReservationView:
        conflicts = {RESERVATION_OVERLAP_CONSTRAINT: ROOM_BOOKED_MESSAGE}
        try:
            values = await self._prepare(owner_id, payload)
            values.setdefault("status", DEFAULT_RESERVATION_STATUS)
            details = await self.repository.save(Reservation(owner_id=owner_id, **values))
        except StoreError as e:
            raise translate_store_error(e, conflicts) from e

        reservation = details.reservation
        logger.info(
            "Created reservation %s in room %s for owner %s (%s..%s)",
            reservation.id, reservation.room_id, owner_id,
            reservation.start_date, reservation.end_date
        )
        return self._present(details)

    async def update_reservation(
        self, owner_id: UUID, reservation_id: UUID, payload: Any
    ) -> ReservationView:
        conflicts = {RESERVATION_OVERLAP_CONSTRAINT: ROOM_BOOKED_MESSAGE}
        not_found = f"Reservation with ID {reservation_id} not found."
        try:
            values = await self._prepare(owner_id, payload, exclude_reservation_id=reservation_id)
            details = await self.repository.update(owner_id, reservation_id, values)
        except StoreError as e:
            raise translate_store_error(e, conflicts, not_found) from e
        if details is None:
            raise NotFoundError(not_found)

        logger.info("Updated reservation %s for owner %s", reservation_id, owner_id)
        return self._present(details)

    async def delete_reservation(self, owner_id: UUID, reservation_id: UUID) -> Dict[str, str]:
        try:
            if await self.repository.find_by_id(owner_id, reservation_id) is None:
                raise NotFoundError("Not found.")
            await self.repository.delete(owner_id, reservation_id)
        except StoreError as e:
            raise translate_store_error(e) from e
        logger.info("Deleted reservation %s for owner %s", reservation_id, owner_id)
        return {"message": "Reservation deleted successfully."}
