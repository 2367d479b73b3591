import logging
from datetime import date
from typing import Any, List, Optional
from uuid import UUID

from fastapi import FastAPI, HTTPException, Depends, Body
from fastapi.security import OAuth2PasswordRequestForm

from api.schemas import (
    PropertyResponse, RoomResponse, RoomAvailabilityResponse,
    ReservationResponse, RoomSummaryResponse, PropertySummaryResponse,
    MessageResponse, Token, OwnerResponse
)
from api.dependencies import authenticate, get_current_active_owner
from infrastructure.config import get_settings
from infrastructure.security import create_access_token
from domain.auth import Owner
from domain.enums import ReservationStatus, DEFAULT_RESERVATION_STATUS
from domain.errors import ReservationSystemError

from application.availability import AvailabilityChecker
from application.ownership import OwnershipResolver
from application.services import PropertyService, RoomService, ReservationService
from application.status import ReservationView
from infrastructure.repositories.in_memory_repositories import (
    InMemoryDatabase, InMemoryPropertyRepository, InMemoryRoomRepository, InMemoryReservationRepository
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(
    title=settings.app_title,
    description="Multi-property reservation manager with per-room availability and owner-scoped access",
    version="1.0.0"
)

# Initialize store and repositories
database = InMemoryDatabase()
property_repo = InMemoryPropertyRepository(database)
room_repo = InMemoryRoomRepository(database)
reservation_repo = InMemoryReservationRepository(database)


# Dependency injection
def get_ownership_resolver() -> OwnershipResolver:
    return OwnershipResolver(property_repo, room_repo)

def get_availability_checker() -> AvailabilityChecker:
    return AvailabilityChecker(reservation_repo)

def get_property_service() -> PropertyService:
    return PropertyService(property_repo)

def get_room_service(
    ownership: OwnershipResolver = Depends(get_ownership_resolver),
    availability: AvailabilityChecker = Depends(get_availability_checker)
) -> RoomService:
    return RoomService(room_repo, ownership, availability)

def get_reservation_service(
    ownership: OwnershipResolver = Depends(get_ownership_resolver),
    availability: AvailabilityChecker = Depends(get_availability_checker)
) -> ReservationService:
    return ReservationService(reservation_repo, ownership, availability)


# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/enums/reservation-status", tags=["Enum Reference"])
async def get_reservation_statuses():
    """Get all ReservationStatus values"""
    return {
        "values": [item.value for item in ReservationStatus],
        "default": DEFAULT_RESERVATION_STATUS.value,
        "description": "Stored statuses; 'past' is also derived at read time once the end date has gone by"
    }

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    account = authenticate(form_data.username, form_data.password)
    if not account:
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(account.id)
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=OwnerResponse, tags=["Auth"])
async def read_users_me(current_owner: Owner = Depends(get_current_active_owner)):
    return current_owner

# ============================================================================
# PROPERTY ENDPOINTS
# ============================================================================

@app.get("/api/properties", response_model=List[PropertyResponse], tags=["Properties"])
async def list_properties(
    service: PropertyService = Depends(get_property_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """List the owner's properties"""
    try:
        properties = await service.list_properties(current_owner.id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return [_property_to_response(p) for p in properties]

@app.get("/api/properties/{property_id}", response_model=PropertyResponse, tags=["Properties"])
async def get_property(
    property_id: UUID,
    service: PropertyService = Depends(get_property_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Get property by ID"""
    try:
        prop = await service.get_property(current_owner.id, property_id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _property_to_response(prop)

@app.post("/api/properties", response_model=PropertyResponse, status_code=201, tags=["Properties"])
async def create_property(
    payload: Any = Body(None),
    service: PropertyService = Depends(get_property_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Create property"""
    try:
        prop = await service.create_property(current_owner.id, payload)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _property_to_response(prop)

@app.put("/api/properties/{property_id}", response_model=PropertyResponse, tags=["Properties"])
async def update_property(
    property_id: UUID,
    payload: Any = Body(None),
    service: PropertyService = Depends(get_property_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Update property"""
    try:
        prop = await service.update_property(current_owner.id, property_id, payload)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _property_to_response(prop)

@app.delete("/api/properties/{property_id}", response_model=MessageResponse, tags=["Properties"])
async def delete_property(
    property_id: UUID,
    service: PropertyService = Depends(get_property_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Delete property with its rooms and reservations"""
    try:
        return await service.delete_property(current_owner.id, property_id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

# ============================================================================
# ROOM ENDPOINTS
# ============================================================================

@app.get("/api/rooms", response_model=List[RoomResponse], tags=["Rooms"])
async def list_rooms(
    property_id: Optional[UUID] = None,
    service: RoomService = Depends(get_room_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """List the owner's rooms, optionally for one property"""
    try:
        rooms = await service.list_rooms(current_owner.id, property_id=property_id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return [_room_to_response(r) for r in rooms]

@app.get("/api/rooms/{room_id}", response_model=RoomResponse, tags=["Rooms"])
async def get_room(
    room_id: UUID,
    service: RoomService = Depends(get_room_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Get room by ID"""
    try:
        room = await service.get_room(current_owner.id, room_id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _room_to_response(room)

@app.get("/api/rooms/{room_id}/availability", response_model=RoomAvailabilityResponse, tags=["Rooms"])
async def check_room_availability(
    room_id: UUID,
    start_date: date,
    end_date: date,
    exclude_reservation_id: Optional[UUID] = None,
    service: RoomService = Depends(get_room_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Check whether a room is free for [start_date, end_date)"""
    try:
        result = await service.check_availability(
            current_owner.id, room_id, start_date, end_date,
            exclude_reservation_id=exclude_reservation_id
        )
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return RoomAvailabilityResponse(**result.model_dump())

@app.post("/api/rooms", response_model=RoomResponse, status_code=201, tags=["Rooms"])
async def create_room(
    payload: Any = Body(None),
    service: RoomService = Depends(get_room_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Create room inside one of the owner's properties"""
    try:
        room = await service.create_room(current_owner.id, payload)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _room_to_response(room)

@app.put("/api/rooms/{room_id}", response_model=RoomResponse, tags=["Rooms"])
async def update_room(
    room_id: UUID,
    payload: Any = Body(None),
    service: RoomService = Depends(get_room_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Rename or move room"""
    try:
        room = await service.update_room(current_owner.id, room_id, payload)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _room_to_response(room)

@app.delete("/api/rooms/{room_id}", response_model=MessageResponse, tags=["Rooms"])
async def delete_room(
    room_id: UUID,
    service: RoomService = Depends(get_room_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Delete room with its reservations"""
    try:
        return await service.delete_room(current_owner.id, room_id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

# ============================================================================
# RESERVATION ENDPOINTS
# ============================================================================

@app.get("/api/reservations", response_model=List[ReservationResponse], tags=["Reservations"])
async def list_reservations(
    lastname: Optional[str] = None,
    start_date: Optional[date] = None,
    property_id: Optional[UUID] = None,
    service: ReservationService = Depends(get_reservation_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """List reservations, filtered by last-name prefix, earliest start date or property"""
    try:
        views = await service.list_reservations(
            current_owner.id, lastname=lastname, start_date=start_date, property_id=property_id
        )
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return [_reservation_to_response(v) for v in views]

@app.get("/api/reservations/{reservation_id}", response_model=ReservationResponse, tags=["Reservations"])
async def get_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Get reservation by ID"""
    try:
        view = await service.get_reservation(current_owner.id, reservation_id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _reservation_to_response(view)

@app.post("/api/reservations", response_model=ReservationResponse, status_code=201, tags=["Reservations"])
async def create_reservation(
    payload: Any = Body(None),
    service: ReservationService = Depends(get_reservation_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Create new reservation"""
    try:
        view = await service.create_reservation(current_owner.id, payload)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _reservation_to_response(view)

@app.put("/api/reservations/{reservation_id}", response_model=ReservationResponse, tags=["Reservations"])
async def update_reservation(
    reservation_id: UUID,
    payload: Any = Body(None),
    service: ReservationService = Depends(get_reservation_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Replace reservation details; status is kept when not supplied"""
    try:
        view = await service.update_reservation(current_owner.id, reservation_id, payload)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return _reservation_to_response(view)

@app.delete("/api/reservations/{reservation_id}", response_model=MessageResponse, tags=["Reservations"])
async def delete_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service),
    current_owner: Owner = Depends(get_current_active_owner)
):
    """Delete reservation"""
    try:
        return await service.delete_reservation(current_owner.id, reservation_id)
    except ReservationSystemError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _property_to_response(prop) -> PropertyResponse:
    """Convert Property entity to PropertyResponse"""
    return PropertyResponse(
        id=prop.id,
        owner_id=prop.owner_id,
        name=prop.name,
        description=prop.description,
        created_at=prop.created_at
    )

def _room_to_response(room) -> RoomResponse:
    """Convert Room entity to RoomResponse"""
    return RoomResponse(
        id=room.id,
        owner_id=room.owner_id,
        property_id=room.property_id,
        name=room.name,
        created_at=room.created_at
    )

def _reservation_to_response(view: ReservationView) -> ReservationResponse:
    """Convert a status-annotated reservation to ReservationResponse"""
    reservation = view.details.reservation
    room = view.details.room_summary
    prop = view.details.property_summary
    return ReservationResponse(
        id=reservation.id,
        owner_id=reservation.owner_id,
        property_id=reservation.property_id,
        room_id=reservation.room_id,
        name=reservation.name,
        lastname=reservation.lastname,
        phone=reservation.phone,
        mail=reservation.mail,
        start_date=reservation.start_date,
        end_date=reservation.end_date,
        nightly_rate=reservation.nightly_rate,
        total_price=reservation.total_price,
        adults=reservation.adults,
        children=reservation.children,
        notes=reservation.notes,
        status=reservation.status.value,
        created_at=reservation.created_at,
        modified_at=reservation.modified_at,
        room=RoomSummaryResponse(**room.model_dump()) if room else None,
        property=PropertySummaryResponse(**prop.model_dump()) if prop else None,
        computed_status=view.computed_status.value,
        is_past=view.is_past
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
