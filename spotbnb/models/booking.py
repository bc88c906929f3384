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


"""Booking model."""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship

from spotbnb.database import Base


class Booking(Base):
    """Reservation of a spot by a user for the nights in [start_date, end_date)."""

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    spot_id = Column(Integer, ForeignKey("spots.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("start_date < end_date", name="ck_booking_date_order"),
    )

    # Relationships
    user = relationship("User", back_populates="bookings")
    spot = relationship("Spot", back_populates="bookings")

    def to_dict(self, include_spot: bool = False) -> dict:
        """Convert to dictionary."""
        result = {
            "id": self.id,
            "spotId": self.spot_id,
            "userId": self.user_id,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_spot and self.spot:
            result["Spot"] = self.spot.to_dict(include_timestamps=False)

        return result

    def __repr__(self):
        return (
            f"<Booking(id={self.id}, spot_id={self.spot_id}, user_id={self.user_id}, "
            f"start_date={self.start_date}, end_date={self.end_date})>"
        )
