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


"""Booking conflict validation and mutation engine.

Each operation reads what it needs through the repository, validates with
the pure rules in :mod:`spotbnb.services.booking_rules`, then writes. The
caller passes the acting principal explicitly; ``None`` means the request is
not authenticated.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from spotbnb.models.booking import Booking
from spotbnb.models.user import User
from spotbnb.services.booking_rules import find_conflict, validate_range
from spotbnb.services.exceptions import (
    AlreadyStarted,
    BookingError,
    Conflict,
    Forbidden,
    InvalidRange,
    NotFound,
    Unauthorized,
)
from spotbnb.services.repository import BookingRepository

logger = logging.getLogger(__name__)

BOOKING_NOT_FOUND = "Booking couldn't be found"
SPOT_NOT_FOUND = "Spot couldn't be found"


@dataclass(frozen=True)
class Principal:
    """The authenticated actor making a request."""

    id: int

    @classmethod
    def from_user(cls, user: Optional[User]) -> Optional["Principal"]:
        if user is None:
            return None
        return cls(id=user.id)


@dataclass(frozen=True)
class BookingPatch:
    """Partial update of a booking's dates. ``None`` keeps the stored value."""

    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def resolve(self, booking: Booking) -> Tuple[date, date]:
        start_date = self.start_date if self.start_date is not None else booking.start_date
        end_date = self.end_date if self.end_date is not None else booking.end_date
        return start_date, end_date


class BookingService:
    """Applies list, create, edit and delete transitions under ownership rules."""

    def __init__(
        self,
        repository: BookingRepository,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._repo = repository
        self._clock = clock

    def list_for_user(self, principal: Optional[Principal]) -> List[Booking]:
        """All bookings made by the principal, with their spots loaded."""
        self._require_principal(principal)
        bookings = self._repo.list_for_user(principal.id)
        self._repo.release()
        return bookings

    def create_booking(
        self,
        spot_id: int,
        principal: Optional[Principal],
        start_date: date,
        end_date: date,
    ) -> Booking:
        """Book a spot for [start_date, end_date)."""
        self._require_principal(principal)

        spot = self._repo.lock_spot(spot_id)
        if spot is None:
            raise self._refuse(NotFound(SPOT_NOT_FOUND))

        # Owners cannot book their own listing
        if spot.owner_id == principal.id:
            raise self._refuse(Forbidden())

        self._check_range(spot.id, start_date, end_date, self._clock())

        booking = Booking(
            spot_id=spot.id,
            user_id=principal.id,
            start_date=start_date,
            end_date=end_date,
        )
        try:
            booking = self._repo.add(booking)
        except IntegrityError as e:
            logger.info("Storage rejected booking on spot %s: %s", spot.id, e.orig)
            raise Conflict() from e

        logger.info(
            "Booking %s created on spot %s by user %s (%s to %s)",
            booking.id, spot.id, principal.id, start_date, end_date,
        )
        return booking

    def edit_booking(
        self,
        booking_id: int,
        principal: Optional[Principal],
        patch: BookingPatch,
    ) -> Booking:
        """Move a booking to new dates. Only the renter may edit."""
        self._require_principal(principal)

        booking = self._repo.get_booking(booking_id)
        if booking is None:
            raise self._refuse(NotFound(BOOKING_NOT_FOUND))

        if booking.user_id != principal.id:
            raise self._refuse(Forbidden())

        start_date, end_date = patch.resolve(booking)

        self._repo.lock_spot(booking.spot_id)
        self._check_range(
            booking.spot_id, start_date, end_date, self._clock(), exclude_booking_id=booking.id
        )

        booking.start_date = start_date
        booking.end_date = end_date
        try:
            booking = self._repo.save(booking)
        except IntegrityError as e:
            logger.info("Storage rejected edit of booking %s: %s", booking_id, e.orig)
            raise Conflict() from e

        logger.info(
            "Booking %s moved to %s - %s by user %s",
            booking.id, start_date, end_date, principal.id,
        )
        return booking

    def delete_booking(self, booking_id: int, principal: Optional[Principal]) -> str:
        """Remove a booking that has not started. Renter or spot owner only."""
        self._require_principal(principal)

        booking = self._repo.get_booking(booking_id)
        if booking is None:
            raise self._refuse(NotFound(BOOKING_NOT_FOUND))

        spot = self._repo.get_spot(booking.spot_id)
        is_renter = booking.user_id == principal.id
        is_owner = spot is not None and spot.owner_id == principal.id
        if not (is_renter or is_owner):
            raise self._refuse(Forbidden())

        if booking.start_date < self._clock():
            raise self._refuse(AlreadyStarted())

        self._repo.delete(booking)
        logger.info("Booking %s deleted by user %s", booking_id, principal.id)
        return "Successfully deleted"

    def _check_range(
        self,
        spot_id: int,
        start_date: date,
        end_date: date,
        today: date,
        exclude_booking_id: Optional[int] = None,
    ) -> None:
        errors = validate_range(start_date, end_date, today)
        if errors:
            raise self._refuse(InvalidRange(errors=errors))

        candidates = self._repo.future_bookings_for_spot(
            spot_id, today, exclude_booking_id=exclude_booking_id
        )
        clash = find_conflict(start_date, end_date, candidates)
        if clash is not None:
            logger.debug(
                "Range %s - %s on spot %s overlaps booking %s",
                start_date, end_date, spot_id, clash.id,
            )
            raise self._refuse(Conflict())

    def _refuse(self, error: BookingError) -> BookingError:
        """End the transaction, releasing any locks, before refusing."""
        self._repo.rollback()
        return error

    @staticmethod
    def _require_principal(principal: Optional[Principal]) -> None:
        if principal is None:
            raise Unauthorized()
