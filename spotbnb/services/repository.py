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


"""SQLAlchemy-backed storage for bookings and spots."""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from spotbnb.models.booking import Booking
from spotbnb.models.spot import Spot


class BookingRepository:
    """Reads and writes bookings through a single database session."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self._db.query(Booking).filter(Booking.id == booking_id).first()

    def get_spot(self, spot_id: int) -> Optional[Spot]:
        return self._db.query(Spot).filter(Spot.id == spot_id).first()

    def lock_spot(self, spot_id: int) -> Optional[Spot]:
        """Fetch a spot with a row lock held until the transaction ends.

        Backends without row locks (SQLite) ignore FOR UPDATE; there the
        engine-level BEGIN IMMEDIATE provides the serialization.
        """
        return self._db.query(Spot).filter(Spot.id == spot_id).with_for_update().first()

    def list_for_user(self, user_id: int) -> List[Booking]:
        return (
            self._db.query(Booking)
            .options(joinedload(Booking.spot))
            .filter(Booking.user_id == user_id)
            .order_by(Booking.id)
            .all()
        )

    def future_bookings_for_spot(
        self,
        spot_id: int,
        today: date,
        exclude_booking_id: Optional[int] = None,
    ) -> List[Booking]:
        """Bookings on a spot that start today or later."""
        query = self._db.query(Booking).filter(
            Booking.spot_id == spot_id,
            Booking.start_date >= today,
        )

        if exclude_booking_id is not None:
            query = query.filter(Booking.id != exclude_booking_id)

        return query.order_by(Booking.start_date).all()

    def add(self, booking: Booking) -> Booking:
        self._db.add(booking)
        return self.save(booking)

    def save(self, booking: Booking) -> Booking:
        """Write pending changes, reload the row and commit in one transaction."""
        try:
            self._db.flush()
            self._db.refresh(booking)
        except Exception:
            self._db.rollback()
            raise
        self.commit()
        return booking

    def delete(self, booking: Booking) -> None:
        self._db.delete(booking)
        self.commit()

    def commit(self) -> None:
        """Commit the current transaction, rolling back if it fails."""
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise

    def release(self) -> None:
        """End a read-only transaction, keeping loaded objects usable.

        Sessions are created with expire_on_commit=False, so committing here
        frees SQLite's write lock without reloading anything.
        """
        self._db.commit()

    def rollback(self) -> None:
        self._db.rollback()
