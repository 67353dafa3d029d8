"""SQLAlchemy implementations of the service collaborator interfaces."""

from .booking_repository import BookingRepository
from .enrollment_repository import EnrollmentRepository
from .hotel_repository import HotelRepository, RoomRepository
from .unit_of_work import SqlUnitOfWork

__all__ = [
    "BookingRepository",
    "EnrollmentRepository",
    "HotelRepository",
    "RoomRepository",
    "SqlUnitOfWork",
]
