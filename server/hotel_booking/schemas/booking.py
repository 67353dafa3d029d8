"""Booking-related Pydantic schemas."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BookingRequest(BaseModel):
    """Request schema for creating or moving a booking."""

    room_id: int = Field(
        ...,
        gt=0,
        validation_alias=AliasChoices("room_id", "roomId"),
        description="Room to book",
    )


class BookingIdResponse(BaseModel):
    """Response schema carrying the affected booking's ID."""

    booking_id: int = Field(..., description="Booking ID")


class BookedRoom(BaseModel):
    """Room embedded in a booking response."""

    id: int = Field(..., description="Room ID")
    name: str = Field(..., description="Room name")
    capacity: int = Field(..., gt=0, description="Number of beds")
    hotel_id: int = Field(..., description="Owning hotel ID")
    created_at: datetime = Field(..., description="Creation time (ISO 8601)")
    updated_at: datetime = Field(..., description="Last update time (ISO 8601)")

    model_config = ConfigDict(from_attributes=True)


class BookingOut(BaseModel):
    """The caller's booking and the room it occupies."""

    id: int = Field(..., description="Booking ID")
    room: BookedRoom = Field(..., description="Booked room")

    model_config = ConfigDict(from_attributes=True)
