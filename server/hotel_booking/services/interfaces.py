"""
Collaborator interfaces the booking and hotel services depend on.

Services receive implementations through their constructors; the SQLAlchemy
versions live in hotel_booking.repositories.
"""

from typing import AsyncContextManager, Optional, Protocol, Sequence

from ..models import Booking, Enrollment, Hotel, Room


class EnrollmentLookup(Protocol):
    async def find_with_ticket_by_user_id(self, user_id: int) -> Optional[Enrollment]:
        """Return the user's enrollment with its ticket and ticket type loaded."""
        ...


class RoomLookup(Protocol):
    async def get_room(self, room_id: int, *, for_update: bool = False) -> Optional[Room]:
        """
        Return the room with its current occupancy.

        With for_update=True the room row stays locked until the enclosing
        unit of work ends.
        """
        ...


class HotelLookup(Protocol):
    async def list_hotels(self) -> Sequence[Hotel]:
        ...

    async def get_hotel_with_rooms(self, hotel_id: int) -> Optional[Hotel]:
        ...


class BookingStore(Protocol):
    async def get_by_user(self, user_id: int) -> Optional[Booking]:
        """Return the user's booking with its room loaded."""
        ...

    async def get_by_id(self, booking_id: int) -> Optional[Booking]:
        ...

    async def create(self, user_id: int, room_id: int) -> Booking:
        """Insert a booking. Raises BookingDenied(ALREADY_BOOKED) if the user already has one."""
        ...

    async def change_room(self, booking_id: int, room_id: int) -> Booking:
        """Point the booking at another room and refresh its modification time."""
        ...


class UnitOfWork(Protocol):
    def atomic(self) -> AsyncContextManager[None]:
        """Scope whose writes commit together on success and roll back on any exception."""
        ...
