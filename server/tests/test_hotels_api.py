"""API tests for the hotel catalogue endpoints."""

import pytest

from hotel_booking.models import TicketStatus


@pytest.mark.asyncio
async def test_list_hotels(test_client, auth_headers, create_attendee, create_hotel):
    await create_attendee(1)
    hotel_id, _ = await create_hotel(1, 2, name="Driven Resort")

    response = await test_client.get("/hotels", headers=auth_headers(1))

    assert response.status_code == 200
    hotels = response.json()
    assert len(hotels) == 1
    assert hotels[0]["id"] == hotel_id
    assert hotels[0]["name"] == "Driven Resort"
    assert hotels[0]["image"].startswith("https://")
    assert "rooms" not in hotels[0]


@pytest.mark.asyncio
async def test_list_hotels_when_none_exist(test_client, auth_headers, create_attendee):
    await create_attendee(1)

    response = await test_client.get("/hotels", headers=auth_headers(1))

    assert response.status_code == 404
    assert response.json()["code"] == "NO_HOTELS"


@pytest.mark.asyncio
async def test_ticket_without_hotel_cannot_list(test_client, auth_headers, create_attendee, create_hotel):
    await create_attendee(1, includes_hotel=False)
    await create_hotel(1)

    response = await test_client.get("/hotels", headers=auth_headers(1))

    assert response.status_code == 402
    assert response.json()["code"] == "TICKET_EXCLUDES_HOTEL"


@pytest.mark.asyncio
async def test_unpaid_ticket_cannot_see_rooms(test_client, auth_headers, create_attendee, create_hotel):
    await create_attendee(1, status=TicketStatus.RESERVED)
    hotel_id, _ = await create_hotel(1)

    response = await test_client.get(f"/hotels/{hotel_id}", headers=auth_headers(1))

    assert response.status_code == 402
    assert response.json()["code"] == "TICKET_NOT_PAID"


@pytest.mark.asyncio
async def test_hotel_rooms_show_occupancy(test_client, auth_headers, create_attendee, create_hotel):
    await create_attendee(1)
    hotel_id, (single, double) = await create_hotel(1, 2)
    await test_client.post("/booking", json={"room_id": double}, headers=auth_headers(1))

    response = await test_client.get(f"/hotels/{hotel_id}", headers=auth_headers(1))

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == hotel_id
    rooms = {room["id"]: room for room in data["rooms"]}
    assert list(rooms) == [single, double]
    assert rooms[single]["occupancy"] == 0
    assert rooms[double] == {**rooms[double], "capacity": 2, "occupancy": 1, "hotel_id": hotel_id}


@pytest.mark.asyncio
async def test_unknown_hotel_is_not_found(test_client, auth_headers, create_attendee):
    await create_attendee(1)

    response = await test_client.get("/hotels/999", headers=auth_headers(1))

    assert response.status_code == 404
    assert response.json()["code"] == "HOTEL_NOT_FOUND"


@pytest.mark.asyncio
async def test_hotels_require_authentication(test_client):
    response = await test_client.get("/hotels")

    assert response.status_code == 401
