"""Booking model definition."""

from datetime import datetime

from sqlalchemy import ForeignKey, Integer, func, select
from sqlalchemy.orm import Mapped, column_property, mapped_column, relationship

from ..core.database import Base
from .hotel import Room


class Booking(Base):
    """A user's room reservation. One per user; never deleted, only moved between rooms."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    room_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("rooms.id"),
        nullable=False,
        index=True
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

    room: Mapped["Room"] = relationship("Room", back_populates="bookings")

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user_id={self.user_id}, room_id={self.room_id})>"


# Current occupants of a room, loaded with every Room row.
Room.occupancy = column_property(
    select(func.count(Booking.id))
    .where(Booking.room_id == Room.id)
    .correlate_except(Booking)
    .scalar_subquery()
)
