#!/usr/bin/env python3
# SpotBnB - Vacation Rental Booking API
# Copyright (C) 2025 Oleg Tokmakov
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Database initialization script."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spotbnb.config import configure_logging, init_settings
from spotbnb.database import init_database


def main():
    """Initialize the database."""
    print("Initializing SpotBnB database...")

    # Load configuration
    settings = init_settings()
    configure_logging(settings.app.log_level)

    # Initialize database
    init_database()

    print("Database initialization complete!")


if __name__ == "__main__":
    main()
