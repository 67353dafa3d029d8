"""Test configuration and fixtures."""

import asyncio
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Optional

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from hotel_booking.core.config import settings
from hotel_booking.core.database import Base, build_engine, get_db
from hotel_booking.models import *  # noqa: F403 - Import all models
from hotel_booking.models import Enrollment, Hotel, Room, Ticket, TicketStatus, TicketType
from hotel_booking.services.booking_service import BookingService
from hotel_booking.services.rules import BookingDenied, DenialReason

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = build_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session):
    """Create the application with its database dependency bound to the test session."""
    from hotel_booking.main import create_app

    app = create_app()

    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_token(user_id, **claims) -> str:
    """Sign a bearer token the API accepts for the given user."""
    payload = {"sub": str(user_id), **claims}
    return jwt.encode(payload, settings.bearer_token_secret, algorithm=settings.jwt_algorithm)


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a user ID."""
    def _headers(user_id) -> dict:
        return {"Authorization": f"Bearer {make_token(user_id)}"}
    return _headers


@pytest.fixture
def create_attendee(test_session):
    """
    Create an enrolled user with a ticket.

    Returns the enrollment ID. Pass `ticket=False` to create an enrollment
    without a ticket.
    """
    async def _create(
        user_id: int,
        *,
        status: TicketStatus = TicketStatus.PAID,
        is_remote: bool = False,
        includes_hotel: bool = True,
        ticket: bool = True,
    ) -> int:
        enrollment = Enrollment(user_id=user_id, name=f"Attendee {user_id}")
        test_session.add(enrollment)
        await test_session.flush()

        if ticket:
            ticket_type = TicketType(
                name="Remote" if is_remote else "In person",
                price=100 if is_remote else 600,
                is_remote=is_remote,
                includes_hotel=includes_hotel,
            )
            test_session.add(ticket_type)
            await test_session.flush()
            test_session.add(Ticket(
                enrollment_id=enrollment.id,
                ticket_type_id=ticket_type.id,
                status=TicketStatus(status).value,
            ))

        await test_session.commit()
        return enrollment.id

    return _create


@pytest.fixture
def create_hotel(test_session):
    """
    Create a hotel with rooms of the given capacities.

    Returns `(hotel_id, [room_id, ...])`.
    """
    async def _create(*capacities: int, name: str = "Driven Resort") -> tuple[int, list[int]]:
        hotel = Hotel(name=name, image="https://example.com/hotel.png")
        hotel.rooms = [
            Room(name=f"{100 + index}", capacity=capacity)
            for index, capacity in enumerate(capacities, start=1)
        ]
        test_session.add(hotel)
        await test_session.commit()
        return hotel.id, [room.id for room in hotel.rooms]

    return _create


class InMemoryWorld:
    """Shared state behind the in-memory collaborators."""

    def __init__(self):
        self.enrollments: dict[int, SimpleNamespace] = {}
        self.rooms: dict[int, SimpleNamespace] = {}
        self.bookings: dict[int, SimpleNamespace] = {}
        self.room_lookups: list[int] = []
        self.lock = asyncio.Lock()

    def add_attendee(
        self,
        user_id: int,
        *,
        status: str = TicketStatus.PAID,
        is_remote: bool = False,
        includes_hotel: bool = True,
        ticket: bool = True,
    ) -> None:
        ticket_facts = (
            SimpleNamespace(status=status, is_remote=is_remote, includes_hotel=includes_hotel)
            if ticket else None
        )
        self.enrollments[user_id] = SimpleNamespace(user_id=user_id, ticket=ticket_facts)

    def add_room(self, room_id: int, capacity: int) -> None:
        self.rooms[room_id] = SimpleNamespace(id=room_id, capacity=capacity)

    def add_booking(self, user_id: int, room_id: int) -> int:
        booking_id = len(self.bookings) + 1
        self.bookings[booking_id] = SimpleNamespace(id=booking_id, user_id=user_id, room_id=room_id)
        return booking_id

    def occupancy(self, room_id: int) -> int:
        return sum(1 for booking in self.bookings.values() if booking.room_id == room_id)


class InMemoryEnrollments:
    def __init__(self, world: InMemoryWorld):
        self.world = world

    async def find_with_ticket_by_user_id(self, user_id: int):
        return self.world.enrollments.get(user_id)


class InMemoryRooms:
    def __init__(self, world: InMemoryWorld):
        self.world = world

    async def get_room(self, room_id: int, *, for_update: bool = False):
        self.world.room_lookups.append(room_id)
        room = self.world.rooms.get(room_id)
        if room is None:
            return None
        occupancy = self.world.occupancy(room_id)
        # Yield between reading occupancy and the caller's write
        await asyncio.sleep(0)
        return SimpleNamespace(id=room.id, capacity=room.capacity, occupancy=occupancy)


class InMemoryBookings:
    def __init__(self, world: InMemoryWorld):
        self.world = world

    async def get_by_user(self, user_id: int):
        return next((b for b in self.world.bookings.values() if b.user_id == user_id), None)

    async def get_by_id(self, booking_id: int):
        return self.world.bookings.get(booking_id)

    async def create(self, user_id: int, room_id: int):
        await asyncio.sleep(0)
        if await self.get_by_user(user_id) is not None:
            raise BookingDenied.because(DenialReason.ALREADY_BOOKED)
        booking_id = self.world.add_booking(user_id, room_id)
        return self.world.bookings[booking_id]

    async def change_room(self, booking_id: int, room_id: int):
        await asyncio.sleep(0)
        booking = self.world.bookings[booking_id]
        booking.room_id = room_id
        return booking


class InMemoryUnitOfWork:
    """Serializes atomic blocks the way a row lock on the room would."""

    def __init__(self, world: InMemoryWorld):
        self.world = world

    @asynccontextmanager
    async def atomic(self):
        async with self.world.lock:
            yield


@pytest.fixture
def world() -> InMemoryWorld:
    return InMemoryWorld()


@pytest.fixture
def make_booking_service(world):
    """Build a BookingService over the in-memory world, optionally with another unit of work."""
    def _make(uow: Optional[object] = None) -> BookingService:
        return BookingService(
            enrollments=InMemoryEnrollments(world),
            rooms=InMemoryRooms(world),
            bookings=InMemoryBookings(world),
            uow=uow or InMemoryUnitOfWork(world),
        )
    return _make


@pytest.fixture
def booking_service(make_booking_service) -> BookingService:
    return make_booking_service()
