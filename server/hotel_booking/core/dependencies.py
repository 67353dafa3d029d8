"""FastAPI dependencies for database sessions, authentication, and services."""

from typing import Optional

import jwt
from fastapi import Depends, Header
from jwt import ExpiredSignatureError, PyJWTError
from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories import (
    BookingRepository,
    EnrollmentRepository,
    HotelRepository,
    RoomRepository,
    SqlUnitOfWork,
)
from ..services import BookingService, HotelService
from .config import settings
from .database import get_db
from .exceptions import AuthenticationError


async def get_current_user_id(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> int:
    """
    Authentication dependency that validates Bearer tokens.

    The token's `sub` claim carries the numeric user ID.

    Args:
        authorization: Authorization header with Bearer token

    Returns:
        int: Authenticated user ID

    Raises:
        AuthenticationError: If the token is missing, malformed, expired or invalid
    """
    if not authorization:
        raise AuthenticationError("Authorization header missing")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError("Invalid authorization header format")

    if scheme.lower() != "bearer":
        raise AuthenticationError("Invalid authentication scheme")

    try:
        payload = jwt.decode(
            token,
            settings.bearer_token_secret,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except PyJWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")


def get_booking_service(db: AsyncSession = Depends(get_db)) -> BookingService:
    """Build a booking service bound to the request's database session."""
    return BookingService(
        enrollments=EnrollmentRepository(db),
        rooms=RoomRepository(db),
        bookings=BookingRepository(db),
        uow=SqlUnitOfWork(db),
    )


def get_hotel_service(db: AsyncSession = Depends(get_db)) -> HotelService:
    """Build a hotel service bound to the request's database session."""
    return HotelService(
        enrollments=EnrollmentRepository(db),
        hotels=HotelRepository(db),
    )


CurrentUserId = Depends(get_current_user_id)
DatabaseSession = Depends(get_db)
