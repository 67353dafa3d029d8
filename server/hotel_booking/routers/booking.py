"""Booking router: view, create and move the caller's room booking."""

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from ..core.dependencies import CurrentUserId, get_booking_service
from ..schemas.booking import BookingIdResponse, BookingOut, BookingRequest
from ..schemas.common import Problem
from ..services.booking_service import BookingService

router = APIRouter(prefix="/booking", tags=["booking"])

# Define dependencies to avoid B008 linting errors
BOOKING_SERVICE_DEPENDENCY = Depends(get_booking_service)

PROBLEM_RESPONSES = {
    400: {"model": Problem, "description": "Validation error"},
    401: {"model": Problem, "description": "Missing or invalid bearer token"},
    402: {"model": Problem, "description": "Ticket unpaid, remote, or without hotel"},
    403: {"model": Problem, "description": "Room full, booking not owned, or already booked"},
    404: {"model": Problem, "description": "Enrollment, ticket, room or booking not found"},
}


def _booking_id_response(booking_id: int) -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content=BookingIdResponse(booking_id=booking_id).model_dump(),
    )


@router.get("", response_model=BookingOut, responses=PROBLEM_RESPONSES)
async def get_booking(
    user_id: int = CurrentUserId,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Get the caller's booking and the room it occupies."""
    booking = await booking_service.get_booking(user_id)

    response_data = BookingOut.model_validate(booking)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json"),
    )


@router.post("", response_model=BookingIdResponse, responses=PROBLEM_RESPONSES)
async def create_booking(
    request: BookingRequest,
    user_id: int = CurrentUserId,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """
    Book a room for the caller.

    Requires a paid, in-person ticket that includes hotel, no existing
    booking, and a free bed in the room.
    """
    booking_id = await booking_service.create_booking(user_id, request.room_id)
    return _booking_id_response(booking_id)


@router.put("/{booking_id}", response_model=BookingIdResponse, responses=PROBLEM_RESPONSES)
async def update_booking(
    request: BookingRequest,
    booking_id: int = Path(..., gt=0, description="Booking to move"),
    user_id: int = CurrentUserId,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Move one of the caller's bookings to another room."""
    moved_id = await booking_service.update_booking(user_id, request.room_id, booking_id=booking_id)
    return _booking_id_response(moved_id)


@router.put("", response_model=BookingIdResponse, responses=PROBLEM_RESPONSES, deprecated=True)
async def update_own_booking(
    request: BookingRequest,
    user_id: int = CurrentUserId,
    booking_service: BookingService = BOOKING_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """
    Move the caller's booking to another room.

    Deprecated: use PUT /booking/{booking_id}.
    """
    moved_id = await booking_service.update_booking(user_id, request.room_id)
    return _booking_id_response(moved_id)
