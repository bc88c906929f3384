from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from spotbnb.database import build_engine, create_tables, get_db
from spotbnb.main import create_app
from spotbnb.middleware.auth import issue_auth_token
from spotbnb.models import Booking, Spot, User
from spotbnb.routes.bookings import get_clock

TODAY = date(2024, 5, 20)


@pytest.fixture
def session_factory():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    create_tables(engine)
    yield sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    app = create_app(use_lifespan=False)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: (lambda: TODAY)
    return TestClient(app)


def make_user(db, username: str) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        first_name=username.title(),
        last_name="Tester",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_spot(db, owner: User, name: str = "Beach House") -> Spot:
    spot = Spot(
        owner_id=owner.id,
        address="123 Disney Lane",
        city="San Francisco",
        state="California",
        country="United States of America",
        lat=37.7645358,
        lng=-122.4730327,
        name=name,
        description="Place where web developers are created",
        price=Decimal("123.00"),
    )
    db.add(spot)
    db.commit()
    db.refresh(spot)
    return spot


def make_booking(db, spot: Spot, user: User, start_date: date, end_date: date) -> Booking:
    booking = Booking(
        spot_id=spot.id,
        user_id=user.id,
        start_date=start_date,
        end_date=end_date,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def auth_headers(db, user: User) -> dict:
    token = issue_auth_token(db, user)
    return {"Authorization": f"Bearer {token.token}"}
