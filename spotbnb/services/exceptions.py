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


"""Booking engine errors.

Every error is an expected, user-facing outcome. The API layer turns them
into JSON responses through a single exception handler.
"""

from typing import Dict, Optional


class BookingError(Exception):
    """Base class for booking engine errors."""

    status_code = 400
    default_message = "Bad Request"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.errors = errors or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert to the JSON error body."""
        body = {"message": self.message}
        if self.errors:
            body["errors"] = dict(self.errors)
        return body


class Unauthorized(BookingError):
    status_code = 401
    default_message = "Authentication required"


class NotFound(BookingError):
    status_code = 404
    default_message = "Booking couldn't be found"


class Forbidden(BookingError):
    status_code = 403
    default_message = "Forbidden"


class InvalidRange(BookingError):
    status_code = 400
    default_message = "Bad Request"


class Conflict(BookingError):
    status_code = 403
    default_message = "Sorry, this spot is already booked for the specified dates"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None):
        if errors is None:
            errors = {
                "startDate": "Start date conflicts with an existing booking",
                "endDate": "End date conflicts with an existing booking",
            }
        super().__init__(message, errors)


class AlreadyStarted(BookingError):
    status_code = 403
    default_message = "Bookings that have been started can't be deleted"
