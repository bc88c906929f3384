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


"""Authentication dependencies."""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from spotbnb.config import get_settings
from spotbnb.database import get_db
from spotbnb.models.auth import AuthToken
from spotbnb.models.user import User
from spotbnb.utils.helpers import generate_token


def get_token_from_request(request: Request) -> Optional[str]:
    """Extract auth token from request cookies or header."""
    # Try cookie first
    token = request.cookies.get(get_settings().security.token_cookie)
    if token:
        return token

    # Try Authorization header
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return None


def resolve_user(db: Session, token: Optional[str]) -> Optional[User]:
    """Find the active user a token belongs to.

    Returns None for missing, unknown, expired or revoked tokens and for
    deactivated accounts.
    """
    if not token:
        return None

    auth_token = db.query(AuthToken).filter(AuthToken.token == token).first()
    user = auth_token.user if auth_token and auth_token.is_valid() else None

    if not user or not user.is_active:
        # End the lookup transaction so it holds no lock
        db.rollback()
        return None

    # Update last used timestamp
    auth_token.last_used_at = datetime.utcnow()
    db.commit()

    return user


async def get_current_user_optional(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Get the current user if authenticated, otherwise None.

    Routes hand the result to the booking engine, which decides how an
    anonymous request is refused.
    """
    return resolve_user(db, get_token_from_request(request))


def issue_auth_token(
    db: Session,
    user: User,
    user_agent: Optional[str] = None,
) -> AuthToken:
    """Create a new session token for a user."""
    settings = get_settings()

    auth_token = AuthToken(
        user_id=user.id,
        token=generate_token(),
        expires_at=datetime.utcnow() + timedelta(days=settings.security.auth_token_days),
        user_agent=user_agent,
    )
    db.add(auth_token)
    db.commit()
    db.refresh(auth_token)

    return auth_token
