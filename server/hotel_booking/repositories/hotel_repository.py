"""Hotel and room lookups."""

import logging
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.hotel import Hotel, Room

logger = logging.getLogger(__name__)


class HotelRepository:
    """Read access to hotels and their rooms."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_hotels(self) -> Sequence[Hotel]:
        """Get all hotels ordered by ID."""
        stmt = (
            select(Hotel)
            .order_by(Hotel.id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def get_hotel_with_rooms(self, hotel_id: int) -> Optional[Hotel]:
        """Get a hotel with its rooms (and their occupancy) loaded."""
        stmt = (
            select(Hotel)
            .options(selectinload(Hotel.rooms))
            .where(Hotel.id == hotel_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class RoomRepository:
    """Room lookups, optionally row-locking the room for a capacity decision."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_room(self, room_id: int, *, for_update: bool = False) -> Optional[Room]:
        """
        Get a room with a freshly counted occupancy.

        Args:
            room_id: Room to load
            for_update: Lock the room row until the current transaction ends,
                so concurrent bookers of the same room queue behind each other.
                Dialects without row locks (SQLite) ignore the clause.

        Returns:
            Room if found, None otherwise
        """
        if for_update:
            # The lock gets its own statement; occupancy is counted only once
            # it is held, so the count sees bookings committed while waiting.
            locked = await self.db.execute(
                select(Room.id).where(Room.id == room_id).with_for_update()
            )
            if locked.scalar_one_or_none() is None:
                return None

        stmt = (
            select(Room)
            .where(Room.id == room_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        room = result.scalar_one_or_none()

        if room is not None and for_update:
            logger.debug(
                "Acquired row lock for room",
                extra={"room_id": room_id, "occupancy": room.occupancy, "capacity": room.capacity}
            )

        return room
