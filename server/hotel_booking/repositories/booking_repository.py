"""Booking persistence."""

import logging
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.observability import metrics_collector
from ..models.booking import Booking
from ..services.rules import BookingDenied, DenialReason

logger = logging.getLogger(__name__)


class BookingRepository:
    """Reads and writes bookings. Writes are flushed, not committed; the unit of work commits."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_user(self, user_id: int) -> Optional[Booking]:
        """Get a user's booking with its room."""
        stmt = (
            select(Booking)
            .options(selectinload(Booking.room))
            .where(Booking.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, booking_id: int) -> Optional[Booking]:
        """Get a booking by ID with its room."""
        stmt = (
            select(Booking)
            .options(selectinload(Booking.room))
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, user_id: int, room_id: int) -> Booking:
        """
        Insert a booking for a user.

        Raises:
            BookingDenied: ALREADY_BOOKED when the one-booking-per-user
                constraint rejects the row (a concurrent create won the race).
        """
        booking = Booking(user_id=user_id, room_id=room_id)
        self.db.add(booking)

        try:
            await self.db.flush()
        except IntegrityError as e:
            logger.warning(
                "Booking insert rejected by constraint",
                extra={"user_id": user_id, "room_id": room_id, "error": str(e.orig)}
            )
            metrics_collector.record_denial(DenialReason.ALREADY_BOOKED.value)
            raise BookingDenied.because(DenialReason.ALREADY_BOOKED) from e

        await self.db.refresh(booking)
        return booking

    async def change_room(self, booking_id: int, room_id: int) -> Booking:
        """Move a booking to another room and stamp its modification time."""
        stmt = (
            update(Booking)
            .where(Booking.id == booking_id)
            .values(room_id=room_id, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(stmt)

        booking = await self.get_by_id(booking_id)
        if booking is None:
            raise BookingDenied.because(DenialReason.BOOKING_NOT_FOUND)
        return booking
