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


"""Pure booking rules: date range validation and overlap detection."""

from datetime import date
from typing import Dict, Iterable, Optional, Protocol


class DateRange(Protocol):
    start_date: date
    end_date: date


def validate_range(start_date: date, end_date: date, today: date) -> Dict[str, str]:
    """Validate a proposed stay.

    Returns a map of field name to message for every failed rule; an empty
    map means the range is acceptable. A start of ``today`` is allowed.
    """
    errors = {}
    if start_date < today:
        errors["startDate"] = "startDate cannot be in the past"
    if start_date >= end_date:
        errors["endDate"] = "endDate cannot be on or before startDate"
    return errors


def ranges_overlap(start_date: date, end_date: date, other_start: date, other_end: date) -> bool:
    """Half-open overlap test of [start_date, end_date) against [other_start, other_end).

    A stay starting on the day another one ends does not overlap it.
    """
    starts_inside = other_start <= start_date < other_end
    wraps_start = start_date < other_start and end_date > other_start
    return starts_inside or wraps_start


def find_conflict(
    start_date: date,
    end_date: date,
    existing: Iterable[DateRange],
) -> Optional[DateRange]:
    """Return the first existing booking the proposed range overlaps, if any."""
    for booking in existing:
        if ranges_overlap(start_date, end_date, booking.start_date, booking.end_date):
            return booking
    return None
