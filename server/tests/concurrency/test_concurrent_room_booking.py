"""Concurrency tests for room capacity under racing booking requests."""

import asyncio
from contextlib import asynccontextmanager

import pytest

from hotel_booking.services.rules import BookingDenied, DenialReason


class UnguardedUnitOfWork:
    """Runs atomic blocks without serializing them."""

    @asynccontextmanager
    async def atomic(self):
        yield


async def _book_all(service, user_ids, room_id):
    results = await asyncio.gather(
        *(service.create_booking(user_id, room_id) for user_id in user_ids),
        return_exceptions=True,
    )
    created = [r for r in results if isinstance(r, int)]
    denied = [r for r in results if isinstance(r, BookingDenied)]
    return created, denied


@pytest.mark.asyncio
async def test_concurrent_creates_never_overfill_a_room(world, booking_service):
    """Racing creates for the same room yield exactly `capacity` bookings."""
    capacity = 5
    user_ids = list(range(1, 51))
    for user_id in user_ids:
        world.add_attendee(user_id)
    world.add_room(1, capacity=capacity)

    created, denied = await _book_all(booking_service, user_ids, 1)

    assert len(created) == capacity
    assert len(denied) == len(user_ids) - capacity
    assert all(d.reason == DenialReason.ROOM_FULL for d in denied)
    assert world.occupancy(1) == capacity


@pytest.mark.asyncio
async def test_concurrent_moves_into_a_room_respect_capacity(world, booking_service):
    capacity = 2
    world.add_room(1, capacity=100)
    world.add_room(2, capacity=capacity)
    booking_ids = {user_id: world.add_booking(user_id, 1) for user_id in range(1, 11)}

    results = await asyncio.gather(
        *(
            booking_service.update_booking(user_id, 2, booking_id=booking_id)
            for user_id, booking_id in booking_ids.items()
        ),
        return_exceptions=True,
    )

    moved = [r for r in results if isinstance(r, int)]
    assert len(moved) == capacity
    assert world.occupancy(2) == capacity
    assert world.occupancy(1) == len(booking_ids) - capacity


@pytest.mark.asyncio
async def test_same_user_racing_creates_gets_one_booking(world, booking_service):
    world.add_attendee(1)
    world.add_room(1, capacity=10)

    created, denied = await _book_all(booking_service, [1, 1, 1, 1], 1)

    assert len(created) == 1
    assert all(d.reason == DenialReason.ALREADY_BOOKED for d in denied)
    assert world.occupancy(1) == 1


@pytest.mark.asyncio
async def test_without_serialization_the_check_then_write_race_overfills(world, make_booking_service):
    """Control case: the same workload overfills the room when atomic blocks do not serialize."""
    capacity = 2
    user_ids = list(range(1, 11))
    for user_id in user_ids:
        world.add_attendee(user_id)
    world.add_room(1, capacity=capacity)
    service = make_booking_service(UnguardedUnitOfWork())

    await _book_all(service, user_ids, 1)

    assert world.occupancy(1) > capacity
