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


"""Utility helper functions."""

import re
import secrets
from typing import Optional


def generate_token(length: int = 32) -> str:
    """Generate a secure random token.

    Args:
        length: Length of the token in bytes (will be URL-safe encoded).

    Returns:
        URL-safe random token string.
    """
    return secrets.token_urlsafe(length)


def sanitize_input(text: Optional[str], max_length: Optional[int] = None) -> str:
    """Sanitize user input by stripping HTML tags and limiting length.

    Args:
        text: Input text to sanitize.
        max_length: Maximum allowed length (truncates if exceeded).

    Returns:
        Sanitized string.
    """
    if text is None:
        return ""

    # Remove HTML tags
    clean = re.sub(r"<[^>]+>", "", str(text))

    # Normalize whitespace
    clean = " ".join(clean.split())

    # Truncate if needed
    if max_length and len(clean) > max_length:
        clean = clean[:max_length]

    return clean


def is_valid_email(email: str) -> bool:
    """Validate email format.

    Args:
        email: Email address to validate.

    Returns:
        True if valid email format.
    """
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email))
