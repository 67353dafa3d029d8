"""Booking service: eligibility, capacity and ownership around booking writes."""

import logging
from typing import Optional

from ..core.observability import metrics_collector
from ..models.booking import Booking
from .interfaces import BookingStore, EnrollmentLookup, RoomLookup, UnitOfWork
from .rules import BookingDenied, DenialReason, check_capacity, check_eligibility

logger = logging.getLogger(__name__)


class BookingService:
    """
    Orchestrates the booking flows for a single caller.

    The capacity check and the write it guards always run inside one
    `UnitOfWork.atomic()` block, with the target room locked, so two
    requests racing for the last bed cannot both see it free.
    """

    def __init__(
        self,
        enrollments: EnrollmentLookup,
        rooms: RoomLookup,
        bookings: BookingStore,
        uow: UnitOfWork,
    ):
        self.enrollments = enrollments
        self.rooms = rooms
        self.bookings = bookings
        self.uow = uow

    async def get_booking(self, user_id: int) -> Booking:
        """
        Get the caller's booking with its room.

        Raises:
            BookingDenied: BOOKING_NOT_FOUND if the user has no booking
        """
        booking = await self.bookings.get_by_user(user_id)
        if booking is None:
            raise self._denied(DenialReason.BOOKING_NOT_FOUND, user_id=user_id)
        return booking

    async def create_booking(self, user_id: int, room_id: int) -> int:
        """
        Book a room for the caller.

        Args:
            user_id: Authenticated caller
            room_id: Room to book

        Returns:
            ID of the new booking

        Raises:
            BookingDenied: on a missing or ineligible ticket, an existing
                booking, a missing room, or a full room
        """
        await self._ensure_eligible(user_id)

        existing = await self.bookings.get_by_user(user_id)
        if existing is not None:
            raise self._denied(
                DenialReason.ALREADY_BOOKED,
                user_id=user_id,
                booking_id=existing.id,
            )

        async with self.uow.atomic():
            room = await self.rooms.get_room(room_id, for_update=True)
            self._ensure_capacity(room, room_id, user_id)
            booking = await self.bookings.create(user_id, room_id)

        metrics_collector.record_booking_created()
        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "room_id": room_id,
                "occupancy_before": room.occupancy,
                "capacity": room.capacity,
            }
        )
        return booking.id

    async def update_booking(
        self,
        user_id: int,
        room_id: int,
        booking_id: Optional[int] = None,
    ) -> int:
        """
        Move a booking to another room.

        Args:
            user_id: Authenticated caller
            room_id: Room to move into
            booking_id: Booking to move. When omitted the caller's own booking
                is used; that form is deprecated in favour of passing the ID.

        Returns:
            ID of the moved booking

        Raises:
            BookingDenied: BOOKING_NOT_FOUND / NOT_BOOKING_OWNER when the ID does
                not resolve or belongs to someone else, NO_BOOKING_TO_CHANGE when
                the caller has nothing to move, ROOM_NOT_FOUND / ROOM_FULL for
                the target room
        """
        booking = await self._resolve_booking_to_change(user_id, booking_id)
        from_room_id = booking.room_id

        async with self.uow.atomic():
            room = await self.rooms.get_room(room_id, for_update=True)
            self._ensure_capacity(room, room_id, user_id)
            moved = await self.bookings.change_room(booking.id, room_id)

        metrics_collector.record_booking_moved()
        logger.info(
            "Booking moved successfully",
            extra={
                "booking_id": moved.id,
                "user_id": user_id,
                "from_room_id": from_room_id,
                "to_room_id": room_id,
            }
        )
        return moved.id

    async def _ensure_eligible(self, user_id: int) -> None:
        enrollment = await self.enrollments.find_with_ticket_by_user_id(user_id)
        if enrollment is None:
            verdict = check_eligibility(None, missing=DenialReason.ENROLLMENT_NOT_FOUND)
        else:
            verdict = check_eligibility(enrollment.ticket)

        if not verdict.admitted:
            metrics_collector.record_denial(verdict.denial.reason.value)
            logger.warning(
                "Booking refused - ticket not eligible",
                extra={"user_id": user_id, "reason": verdict.denial.reason.value}
            )
        verdict.enforce()

    def _ensure_capacity(self, room, room_id: int, user_id: int) -> None:
        verdict = check_capacity(room)
        if not verdict.admitted:
            metrics_collector.record_denial(verdict.denial.reason.value)
            logger.warning(
                "Booking refused - room unavailable",
                extra={
                    "user_id": user_id,
                    "room_id": room_id,
                    "reason": verdict.denial.reason.value,
                    "occupancy": getattr(room, "occupancy", None),
                    "capacity": getattr(room, "capacity", None),
                }
            )
        verdict.enforce()

    async def _resolve_booking_to_change(self, user_id: int, booking_id: Optional[int]) -> Booking:
        if booking_id is None:
            logger.warning(
                "Booking update without booking ID is deprecated",
                extra={"user_id": user_id}
            )
            booking = await self.bookings.get_by_user(user_id)
            if booking is None:
                raise self._denied(DenialReason.NO_BOOKING_TO_CHANGE, user_id=user_id)
            return booking

        booking = await self.bookings.get_by_id(booking_id)
        if booking is None:
            raise self._denied(DenialReason.BOOKING_NOT_FOUND, user_id=user_id, booking_id=booking_id)
        if booking.user_id != user_id:
            raise self._denied(DenialReason.NOT_BOOKING_OWNER, user_id=user_id, booking_id=booking_id)
        return booking

    @staticmethod
    def _denied(reason: DenialReason, **context) -> BookingDenied:
        metrics_collector.record_denial(reason.value)
        logger.warning("Booking refused", extra={"reason": reason.value, **context})
        return BookingDenied.because(reason)
