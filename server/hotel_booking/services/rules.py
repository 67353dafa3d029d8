"""
Booking rules: ticket eligibility and room capacity.

Both checks are pure classifications. They return a `Verdict` and never touch
storage or raise; callers decide when a denial ends the operation by calling
`Verdict.enforce()`, which raises `BookingDenied`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from ..models.enrollment import TicketStatus


class DenialKind(str, Enum):
    """Broad category of a denial, translated to a transport status at the boundary."""
    NOT_FOUND = "NOT_FOUND"
    PAYMENT_REQUIRED = "PAYMENT_REQUIRED"
    FORBIDDEN = "FORBIDDEN"


class DenialReason(str, Enum):
    """The specific rule that refused the operation."""
    ENROLLMENT_NOT_FOUND = "ENROLLMENT_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    TICKET_NOT_PAID = "TICKET_NOT_PAID"
    TICKET_IS_REMOTE = "TICKET_IS_REMOTE"
    TICKET_EXCLUDES_HOTEL = "TICKET_EXCLUDES_HOTEL"
    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    ROOM_FULL = "ROOM_FULL"
    HOTEL_NOT_FOUND = "HOTEL_NOT_FOUND"
    NO_HOTELS = "NO_HOTELS"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    NO_BOOKING_TO_CHANGE = "NO_BOOKING_TO_CHANGE"
    NOT_BOOKING_OWNER = "NOT_BOOKING_OWNER"
    ALREADY_BOOKED = "ALREADY_BOOKED"


_KIND_BY_REASON = {
    DenialReason.ENROLLMENT_NOT_FOUND: DenialKind.NOT_FOUND,
    DenialReason.TICKET_NOT_FOUND: DenialKind.NOT_FOUND,
    DenialReason.TICKET_NOT_PAID: DenialKind.PAYMENT_REQUIRED,
    DenialReason.TICKET_IS_REMOTE: DenialKind.PAYMENT_REQUIRED,
    DenialReason.TICKET_EXCLUDES_HOTEL: DenialKind.PAYMENT_REQUIRED,
    DenialReason.ROOM_NOT_FOUND: DenialKind.NOT_FOUND,
    DenialReason.ROOM_FULL: DenialKind.FORBIDDEN,
    DenialReason.HOTEL_NOT_FOUND: DenialKind.NOT_FOUND,
    DenialReason.NO_HOTELS: DenialKind.NOT_FOUND,
    DenialReason.BOOKING_NOT_FOUND: DenialKind.NOT_FOUND,
    DenialReason.NO_BOOKING_TO_CHANGE: DenialKind.FORBIDDEN,
    DenialReason.NOT_BOOKING_OWNER: DenialKind.FORBIDDEN,
    DenialReason.ALREADY_BOOKED: DenialKind.FORBIDDEN,
}

_DEFAULT_MESSAGES = {
    DenialReason.ENROLLMENT_NOT_FOUND: "No enrollment found for this user",
    DenialReason.TICKET_NOT_FOUND: "No ticket found for this enrollment",
    DenialReason.TICKET_NOT_PAID: "Ticket is not paid",
    DenialReason.TICKET_IS_REMOTE: "Ticket is remote",
    DenialReason.TICKET_EXCLUDES_HOTEL: "Ticket doesn't include hotel",
    DenialReason.ROOM_NOT_FOUND: "Room not found",
    DenialReason.ROOM_FULL: "Room is already full",
    DenialReason.HOTEL_NOT_FOUND: "Hotel not found",
    DenialReason.NO_HOTELS: "No hotels available",
    DenialReason.BOOKING_NOT_FOUND: "Booking not found",
    DenialReason.NO_BOOKING_TO_CHANGE: "User has no booking to change",
    DenialReason.NOT_BOOKING_OWNER: "Booking belongs to another user",
    DenialReason.ALREADY_BOOKED: "User already has a booking",
}


@dataclass(frozen=True)
class Denial:
    """Why an operation was refused: a reason plus a human-readable message."""

    reason: DenialReason
    message: str

    @classmethod
    def of(cls, reason: DenialReason, message: Optional[str] = None) -> "Denial":
        return cls(reason=reason, message=message or _DEFAULT_MESSAGES[reason])

    @property
    def kind(self) -> DenialKind:
        return _KIND_BY_REASON[self.reason]


class BookingDenied(Exception):
    """Raised when a booking rule refuses the current operation."""

    def __init__(self, denial: Denial):
        super().__init__(denial.message)
        self.denial = denial

    @property
    def kind(self) -> DenialKind:
        return self.denial.kind

    @property
    def reason(self) -> DenialReason:
        return self.denial.reason

    @classmethod
    def because(cls, reason: DenialReason, message: Optional[str] = None) -> "BookingDenied":
        return cls(Denial.of(reason, message))


@dataclass(frozen=True)
class Verdict:
    """Outcome of a rule check. Admitted when no denial is attached."""

    denial: Optional[Denial] = None

    @property
    def admitted(self) -> bool:
        return self.denial is None

    @classmethod
    def deny(cls, reason: DenialReason, message: Optional[str] = None) -> "Verdict":
        return cls(denial=Denial.of(reason, message))

    def enforce(self) -> None:
        """Raise BookingDenied if this verdict is a denial."""
        if self.denial is not None:
            raise BookingDenied(self.denial)


ADMITTED = Verdict()


class TicketFacts(Protocol):
    """What eligibility needs to know about a ticket."""

    status: str
    is_remote: bool
    includes_hotel: bool


class RoomFacts(Protocol):
    """What the capacity check needs to know about a room."""

    capacity: int
    occupancy: int


def check_eligibility(
    ticket: Optional[TicketFacts],
    *,
    missing: DenialReason = DenialReason.TICKET_NOT_FOUND,
) -> Verdict:
    """
    Decide whether a ticket entitles its holder to hotel lodging.

    Rules are evaluated in order and the first failing one wins: a missing
    ticket is NOT_FOUND; an unpaid, remote, or hotel-less ticket is
    PAYMENT_REQUIRED.

    Args:
        ticket: The enrollment's ticket, or None when there is no enrollment
            or no ticket.
        missing: Reason reported when ticket is None, letting callers tell
            a missing enrollment apart from a missing ticket.
    """
    if ticket is None:
        return Verdict.deny(missing)
    if ticket.status != TicketStatus.PAID:
        return Verdict.deny(DenialReason.TICKET_NOT_PAID)
    if ticket.is_remote:
        return Verdict.deny(DenialReason.TICKET_IS_REMOTE)
    if not ticket.includes_hotel:
        return Verdict.deny(DenialReason.TICKET_EXCLUDES_HOTEL)
    return ADMITTED


def check_capacity(room: Optional[RoomFacts]) -> Verdict:
    """Decide whether a room can take one more occupant. A room at capacity is full."""
    if room is None:
        return Verdict.deny(DenialReason.ROOM_NOT_FOUND)
    if room.occupancy >= room.capacity:
        return Verdict.deny(DenialReason.ROOM_FULL)
    return ADMITTED
