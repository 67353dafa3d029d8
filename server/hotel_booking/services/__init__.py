"""Service layer package."""

from .booking_service import BookingService
from .hotel_service import HotelService
from .rules import (
    BookingDenied,
    Denial,
    DenialKind,
    DenialReason,
    Verdict,
    check_capacity,
    check_eligibility,
)

__all__ = [
    "BookingDenied",
    "BookingService",
    "Denial",
    "DenialKind",
    "DenialReason",
    "HotelService",
    "Verdict",
    "check_capacity",
    "check_eligibility",
]
