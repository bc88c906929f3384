#!/usr/bin/env python3
# SpotBnB - Vacation Rental Booking API
# Copyright (C) 2025 Oleg Tokmakov
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Create a user and print an auth token for calling the API locally."""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spotbnb.config import init_settings
from spotbnb.database import create_tables, get_session_local
from spotbnb.middleware.auth import issue_auth_token
from spotbnb.models.user import User
from spotbnb.utils.helpers import is_valid_email, sanitize_input


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("email")
    parser.add_argument("username")
    parser.add_argument("--first-name", default="")
    parser.add_argument("--last-name", default="")
    args = parser.parse_args()

    email = args.email.lower().strip()
    if not is_valid_email(email):
        print(f"Invalid email: {args.email}")
        return 1

    init_settings()
    create_tables()

    db = get_session_local()()
    try:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                email=email,
                username=sanitize_input(args.username, 30),
                first_name=sanitize_input(args.first_name, 255) or args.username,
                last_name=sanitize_input(args.last_name, 255),
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            print(f"Created user {user.id}: {user.email}")
        else:
            print(f"Using existing user {user.id}: {user.email}")

        auth_token = issue_auth_token(db, user, user_agent="create_user.py")
        print(f"Token (expires {auth_token.expires_at:%Y-%m-%d}): {auth_token.token}")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
