"""Domain Entities - Auth"""
from pydantic import BaseModel
from uuid import UUID
from typing import Optional


class Owner(BaseModel):
    """Authenticated tenant; every property, room and reservation is scoped to its id"""
    id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    disabled: bool = False

    class Config:
        from_attributes = True


class OwnerInDB(Owner):
    """Owner with hashed password for the account store"""
    hashed_password: str
