#!/usr/bin/env python3
"""Setup script for the hotel booking API: run migrations and load sample data."""

import asyncio
import logging
import sys
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

import jwt  # noqa: E402
from alembic import command  # noqa: E402
from alembic.config import Config  # noqa: E402
from sqlalchemy import func, select  # noqa: E402

from hotel_booking.core.config import settings  # noqa: E402
from hotel_booking.core.database import async_session_factory, close_db  # noqa: E402
from hotel_booking.models import Enrollment, Hotel, Room, Ticket, TicketStatus, TicketType  # noqa: E402

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

DEMO_USER_ID = 1

SAMPLE_HOTELS = [
    ("Driven Resort", "https://images.example.com/hotels/driven-resort.jpg", [1, 2, 3, 3]),
    ("Driven Palace", "https://images.example.com/hotels/driven-palace.jpg", [2, 2, 4]),
    ("Driven World", "https://images.example.com/hotels/driven-world.jpg", [1, 1, 2]),
]


def run_migrations() -> None:
    """Upgrade the database schema to the latest revision."""
    alembic_cfg = Config(str(server_dir / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

    logger.info("Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data() -> None:
    """Create hotels, ticket types, and a paid demo attendee, once."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        try:
            existing_hotels = await db.execute(select(func.count(Hotel.id)))
            if existing_hotels.scalar_one() > 0:
                logger.info("Sample data already exists, skipping...")
                return

            for name, image, capacities in SAMPLE_HOTELS:
                db.add(Hotel(
                    name=name,
                    image=image,
                    rooms=[
                        Room(name=f"{100 + number}", capacity=capacity)
                        for number, capacity in enumerate(capacities, start=1)
                    ],
                ))

            in_person = TicketType(name="In person + hotel", price=600, is_remote=False, includes_hotel=True)
            db.add_all([
                TicketType(name="Online", price=100, is_remote=True, includes_hotel=False),
                TicketType(name="In person", price=250, is_remote=False, includes_hotel=False),
                in_person,
            ])

            enrollment = Enrollment(user_id=DEMO_USER_ID, name="Demo Attendee")
            db.add(enrollment)
            await db.flush()

            db.add(Ticket(
                enrollment_id=enrollment.id,
                ticket_type_id=in_person.id,
                status=TicketStatus.PAID.value,
            ))

            await db.commit()
            logger.info("Sample data created successfully!")

        except Exception as e:
            await db.rollback()
            logger.error("Failed to create sample data", extra={"error": str(e)})
            raise


async def main() -> None:
    """Main setup function."""
    logger.info("Starting hotel booking API setup...")

    # env.py drives its own event loop, so migrations run off this one
    await asyncio.to_thread(run_migrations)
    await create_sample_data()
    await close_db()

    token = jwt.encode({"sub": str(DEMO_USER_ID)}, settings.bearer_token_secret, algorithm=settings.jwt_algorithm)
    logger.info("Setup completed successfully!")
    logger.info("Demo bearer token for user %s: %s", DEMO_USER_ID, token)
    logger.info("You can now start the API server with: cd server && uvicorn hotel_booking.main:app --reload")


if __name__ == "__main__":
    asyncio.run(main())
