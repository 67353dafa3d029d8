"""Hotel router: the hotel catalogue for attendees whose ticket includes lodging."""

import logging

from fastapi import APIRouter, Depends, Path
from fastapi.responses import JSONResponse

from ..core.dependencies import CurrentUserId, get_hotel_service
from ..schemas.common import Problem
from ..schemas.hotel import HotelOut, HotelWithRooms
from ..services.hotel_service import HotelService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/hotels", tags=["hotels"])

HOTEL_SERVICE_DEPENDENCY = Depends(get_hotel_service)

PROBLEM_RESPONSES = {
    401: {"model": Problem, "description": "Missing or invalid bearer token"},
    402: {"model": Problem, "description": "Ticket unpaid, remote, or without hotel"},
    404: {"model": Problem, "description": "Enrollment, ticket or hotel not found"},
}


@router.get("", response_model=list[HotelOut], responses=PROBLEM_RESPONSES)
async def list_hotels(
    user_id: int = CurrentUserId,
    hotel_service: HotelService = HOTEL_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """List all hotels."""
    hotels = await hotel_service.list_hotels(user_id)

    logger.debug("Hotels listed", extra={"user_id": user_id, "count": len(hotels)})
    return JSONResponse(
        status_code=200,
        content=[HotelOut.model_validate(hotel).model_dump(mode="json") for hotel in hotels],
    )


@router.get("/{hotel_id}", response_model=HotelWithRooms, responses=PROBLEM_RESPONSES)
async def get_hotel(
    hotel_id: int = Path(..., gt=0, description="Hotel to show"),
    user_id: int = CurrentUserId,
    hotel_service: HotelService = HOTEL_SERVICE_DEPENDENCY,
) -> JSONResponse:
    """Get a hotel with its rooms and their current occupancy."""
    hotel = await hotel_service.get_hotel_rooms(user_id, hotel_id)

    response_data = HotelWithRooms.model_validate(hotel)
    return JSONResponse(
        status_code=200,
        content=response_data.model_dump(mode="json"),
    )
