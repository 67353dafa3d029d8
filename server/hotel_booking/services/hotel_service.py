"""Hotel catalogue service for eligible attendees."""

import logging
from typing import Sequence

from ..core.observability import metrics_collector
from ..models.hotel import Hotel
from .interfaces import EnrollmentLookup, HotelLookup
from .rules import BookingDenied, DenialReason, check_eligibility

logger = logging.getLogger(__name__)


class HotelService:
    """Lists hotels and rooms. Only attendees whose ticket grants lodging may browse."""

    def __init__(self, enrollments: EnrollmentLookup, hotels: HotelLookup):
        self.enrollments = enrollments
        self.hotels = hotels

    async def check_enrollment(self, user_id: int) -> None:
        """
        Verify the caller holds a paid, in-person ticket that includes lodging.

        Raises:
            BookingDenied: NOT_FOUND reasons for a missing enrollment or ticket,
                PAYMENT_REQUIRED reasons for an ineligible ticket
        """
        enrollment = await self.enrollments.find_with_ticket_by_user_id(user_id)
        if enrollment is None:
            verdict = check_eligibility(None, missing=DenialReason.ENROLLMENT_NOT_FOUND)
        else:
            verdict = check_eligibility(enrollment.ticket)

        if not verdict.admitted:
            metrics_collector.record_denial(verdict.denial.reason.value)
            logger.warning(
                "Hotel access refused",
                extra={"user_id": user_id, "reason": verdict.denial.reason.value}
            )
        verdict.enforce()

    async def list_hotels(self, user_id: int) -> Sequence[Hotel]:
        """
        List every hotel.

        Raises:
            BookingDenied: eligibility denials, or NO_HOTELS when the catalogue is empty
        """
        await self.check_enrollment(user_id)

        hotels = await self.hotels.list_hotels()
        if not hotels:
            raise BookingDenied.because(DenialReason.NO_HOTELS)
        return hotels

    async def get_hotel_rooms(self, user_id: int, hotel_id: int) -> Hotel:
        """
        Get a hotel with its rooms.

        Raises:
            BookingDenied: eligibility denials, or HOTEL_NOT_FOUND
        """
        await self.check_enrollment(user_id)

        hotel = await self.hotels.get_hotel_with_rooms(hotel_id)
        if hotel is None:
            logger.info("Hotel not found", extra={"hotel_id": hotel_id})
            raise BookingDenied.because(DenialReason.HOTEL_NOT_FOUND)
        return hotel
