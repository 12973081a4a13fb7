# backend/roombook/schemas/rooms.py

from typing import Optional
from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    name: str
    capacity: int = Field(1, ge=1)
    display_order: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class RoomUpdate(BaseModel):
    is_active: Optional[bool] = None
    name: Optional[str] = None
    capacity: Optional[int] = Field(None, ge=1)
    display_order: Optional[int] = None
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class RoomRead(BaseModel):
    id: int
    name: str
    capacity: int
    display_order: Optional[int] = None
    notes: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}
