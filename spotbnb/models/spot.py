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


"""Spot (rental listing) model."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from spotbnb.database import Base


class Spot(Base):
    """A rentable lodging listing."""

    __tablename__ = "spots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    address = Column(String(255), nullable=False)
    city = Column(String(255), nullable=False)
    state = Column(String(255), nullable=False)
    country = Column(String(255), nullable=False)
    lat = Column(Float, nullable=True)
    lng = Column(Float, nullable=True)
    name = Column(String(50), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    owner = relationship("User", back_populates="spots")
    bookings = relationship("Booking", back_populates="spot", cascade="all, delete-orphan")

    def to_dict(self, include_timestamps: bool = True) -> dict:
        """Convert to dictionary."""
        result = {
            "id": self.id,
            "ownerId": self.owner_id,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "country": self.country,
            "lat": self.lat,
            "lng": self.lng,
            "name": self.name,
            "description": self.description,
            "price": float(self.price) if self.price is not None else None,
        }

        if include_timestamps:
            result["createdAt"] = self.created_at.isoformat() if self.created_at else None
            result["updatedAt"] = self.updated_at.isoformat() if self.updated_at else None

        return result

    def __repr__(self):
        return f"<Spot(id={self.id}, owner_id={self.owner_id}, name='{self.name}')>"
