"""Enrollment, ticket and ticket type model definitions."""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base


class TicketStatus(str, Enum):
    """Ticket status enumeration."""
    RESERVED = "RESERVED"
    PAID = "PAID"


class TicketType(Base):
    """Ticket type describing what an event ticket grants."""

    __tablename__ = "ticket_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    is_remote: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    includes_hotel: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        server_onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_ticket_type_price_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<TicketType(id={self.id}, name='{self.name}', "
            f"is_remote={self.is_remote}, includes_hotel={self.includes_hotel})>"
        )


class Enrollment(Base):
    """An attendee's enrollment in the event, owned by exactly one user."""

    __tablename__ = "enrollments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        server_onupdate=func.now()
    )

    ticket: Mapped[Optional["Ticket"]] = relationship(
        "Ticket",
        back_populates="enrollment",
        uselist=False
    )

    def __repr__(self) -> str:
        return f"<Enrollment(id={self.id}, user_id={self.user_id})>"


class Ticket(Base):
    """Ticket bought (or reserved) for an enrollment."""

    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    enrollment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True
    )
    ticket_type_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("ticket_types.id"),
        nullable=False,
        index=True
    )
    status: Mapped[TicketStatus] = mapped_column(
        String(20),
        nullable=False,
        default=TicketStatus.RESERVED
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        server_default=func.now(),
        server_onupdate=func.now()
    )

    enrollment: Mapped["Enrollment"] = relationship("Enrollment", back_populates="ticket")
    ticket_type: Mapped["TicketType"] = relationship("TicketType", lazy="joined")

    @property
    def is_remote(self) -> bool:
        return self.ticket_type.is_remote

    @property
    def includes_hotel(self) -> bool:
        return self.ticket_type.includes_hotel

    def __repr__(self) -> str:
        return f"<Ticket(id={self.id}, enrollment_id={self.enrollment_id}, status={self.status})>"
