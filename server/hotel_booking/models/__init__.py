"""Models module exporting all database models."""

from .booking import Booking
from .enrollment import Enrollment, Ticket, TicketStatus, TicketType
from .hotel import Hotel, Room

__all__ = [
    # Attendee entities
    "Enrollment",
    "Ticket",
    "TicketStatus",
    "TicketType",

    # Lodging entities
    "Hotel",
    "Room",

    # Booking entity
    "Booking",
]
