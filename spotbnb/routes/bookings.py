# SpotBnB - Vacation Rental Booking API
# Copyright (C) 2025 Oleg Tokmakov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.


"""Booking management routes."""

from datetime import date
from typing import Callable, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from spotbnb.database import get_db
from spotbnb.middleware.auth import get_current_user_optional
from spotbnb.models.user import User
from spotbnb.services.bookings import BookingPatch, BookingService, Principal
from spotbnb.services.repository import BookingRepository

router = APIRouter(prefix="/api/bookings")


class BookingUpdate(BaseModel):
    """Booking edit request. Omitted dates keep their stored value."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")


def get_clock() -> Callable[[], date]:
    """Source of the current calendar date."""
    return date.today


def get_booking_service(
    db: Session = Depends(get_db),
    clock: Callable[[], date] = Depends(get_clock),
) -> BookingService:
    """Build the booking engine on top of the request's session."""
    return BookingService(BookingRepository(db), clock=clock)


@router.get("/current")
async def list_current_user_bookings(
    service: BookingService = Depends(get_booking_service),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Get all of the current user's bookings."""
    bookings = service.list_for_user(Principal.from_user(current_user))

    return {
        "Bookings": [b.to_dict(include_spot=True) for b in bookings],
    }


@router.put("/{booking_id}")
async def update_booking(
    booking_id: int,
    data: BookingUpdate,
    service: BookingService = Depends(get_booking_service),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Edit a booking's dates."""
    booking = service.edit_booking(
        booking_id,
        Principal.from_user(current_user),
        BookingPatch(start_date=data.start_date, end_date=data.end_date),
    )

    return booking.to_dict()


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    service: BookingService = Depends(get_booking_service),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Delete a booking that has not started yet."""
    message = service.delete_booking(booking_id, Principal.from_user(current_user))

    return {"message": message}
