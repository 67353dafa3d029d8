"""Enrollment lookups."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from ..models.enrollment import Enrollment, Ticket


class EnrollmentRepository:
    """Read-only access to enrollments and their tickets."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_with_ticket_by_user_id(self, user_id: int) -> Optional[Enrollment]:
        """Get a user's enrollment with ticket and ticket type eagerly loaded."""
        stmt = (
            select(Enrollment)
            .options(selectinload(Enrollment.ticket).joinedload(Ticket.ticket_type))
            .where(Enrollment.user_id == user_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
