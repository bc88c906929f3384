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


"""Database setup and connection management."""

import logging
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from spotbnb.config import get_settings

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()

# Global engine and session factory
_engine = None
_SessionLocal = None


def get_database_url() -> str:
    """Get the database URL from settings."""
    settings = get_settings()
    if settings.database.url:
        return settings.database.url

    db_path = settings.database.path

    # Ensure directory exists
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    return f"sqlite:///{db_path}"


def build_engine(
    database_url: str,
    echo: bool = False,
    serialize_writes: bool = False,
    **kwargs,
) -> Engine:
    """Create an engine with the SQLite tweaks the booking checks rely on.

    With ``serialize_writes`` every SQLite transaction starts with
    ``BEGIN IMMEDIATE``, so a conflict check and the write that follows it
    cannot interleave with another writer.
    """
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args

    engine = create_engine(database_url, echo=echo, **kwargs)

    if not is_sqlite:
        return engine

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        if serialize_writes:
            # Hand transaction control to SQLAlchemy
            dbapi_connection.isolation_level = None

    if serialize_writes:

        @event.listens_for(engine, "begin")
        def do_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def init_engine():
    """Initialize the database engine."""
    global _engine, _SessionLocal

    settings = get_settings()

    _engine = build_engine(
        get_database_url(),
        echo=settings.app.debug,
        serialize_writes=settings.database.serialize_writes,
    )
    _SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=_engine
    )

    return _engine


def get_engine():
    """Get the database engine, initializing if needed."""
    global _engine
    if _engine is None:
        init_engine()
    return _engine


def get_session_local():
    """Get the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        init_engine()
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Dependency to get database session."""
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(engine: Optional[Engine] = None):
    """Create all database tables."""
    # Import all models to ensure they're registered
    from spotbnb.models import auth, booking, spot, user  # noqa: F401

    if engine is None:
        engine = get_engine()
    Base.metadata.create_all(bind=engine)


def init_database():
    """Initialize database tables."""
    create_tables()
    logger.info("Database initialized at %s", get_engine().url)
