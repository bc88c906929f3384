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


"""Spot-scoped booking routes."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, Field

from spotbnb.middleware.auth import get_current_user_optional
from spotbnb.models.user import User
from spotbnb.routes.bookings import get_booking_service
from spotbnb.services.bookings import BookingService, Principal

router = APIRouter(prefix="/api/spots")


class BookingCreate(BaseModel):
    """Booking request for a spot."""

    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")


@router.post("/{spot_id}/bookings", status_code=status.HTTP_201_CREATED)
async def create_booking(
    spot_id: int,
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """Create a booking for a spot."""
    booking = service.create_booking(
        spot_id,
        Principal.from_user(current_user),
        data.start_date,
        data.end_date,
    )

    return booking.to_dict()
