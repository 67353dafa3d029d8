"""Hotel and room Pydantic schemas."""

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class HotelOut(BaseModel):
    """Hotel summary."""

    id: int = Field(..., description="Hotel ID")
    name: str = Field(..., description="Hotel name")
    image: str = Field(..., description="Image URL")
    created_at: datetime = Field(..., description="Creation time (ISO 8601)")
    updated_at: datetime = Field(..., description="Last update time (ISO 8601)")

    model_config = ConfigDict(from_attributes=True)


class RoomWithOccupancy(BaseModel):
    """Room with its current number of occupants."""

    id: int = Field(..., description="Room ID")
    name: str = Field(..., description="Room name")
    capacity: int = Field(..., gt=0, description="Number of beds")
    occupancy: int = Field(..., ge=0, description="Bookings currently in the room")
    hotel_id: int = Field(..., description="Owning hotel ID")
    created_at: datetime = Field(..., description="Creation time (ISO 8601)")
    updated_at: datetime = Field(..., description="Last update time (ISO 8601)")

    model_config = ConfigDict(from_attributes=True)


class HotelWithRooms(HotelOut):
    """Hotel with all of its rooms."""

    rooms: List[RoomWithOccupancy] = Field(default_factory=list, description="Rooms, ordered by ID")
