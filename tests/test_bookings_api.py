from datetime import date, datetime, timedelta

import pytest

from spotbnb.models import AuthToken, Booking
from tests.conftest import auth_headers, make_booking, make_spot, make_user


@pytest.fixture
def world(db):
    owner = make_user(db, "owner")
    renter = make_user(db, "renter")
    spot = make_spot(db, owner)
    booked = make_booking(db, spot, owner, date(2024, 6, 1), date(2024, 6, 5))
    mine = make_booking(db, spot, renter, date(2024, 7, 1), date(2024, 7, 3))
    return {
        "owner": owner,
        "renter": renter,
        "spot": spot,
        "spot_id": spot.id,
        "booked_id": booked.id,
        "mine_id": mine.id,
        "owner_headers": auth_headers(db, owner),
        "renter_headers": auth_headers(db, renter),
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_current_requires_authentication(client, world):
    response = client.get("/api/bookings/current")
    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required"}


def test_list_current_returns_bookings_with_spot(client, world):
    response = client.get("/api/bookings/current", headers=world["renter_headers"])

    assert response.status_code == 200
    bookings = response.json()["Bookings"]
    assert len(bookings) == 1
    booking = bookings[0]
    assert booking["id"] == world["mine_id"]
    assert booking["userId"] == world["renter"].id
    assert booking["startDate"] == "2024-07-01"
    assert booking["endDate"] == "2024-07-03"
    assert booking["Spot"]["id"] == world["spot_id"]
    assert booking["Spot"]["ownerId"] == world["owner"].id
    assert booking["Spot"]["price"] == 123.0
    assert "createdAt" not in booking["Spot"]


def test_token_cookie_is_accepted(client, world):
    token = world["renter_headers"]["Authorization"].split(" ", 1)[1]
    response = client.get("/api/bookings/current", headers={"Cookie": f"token={token}"})
    assert response.status_code == 200


def test_revoked_token_is_anonymous(client, world, db):
    token = world["renter_headers"]["Authorization"].split(" ", 1)[1]
    auth_token = db.query(AuthToken).filter(AuthToken.token == token).first()
    auth_token.is_revoked = True
    db.commit()

    response = client.get("/api/bookings/current", headers=world["renter_headers"])
    assert response.status_code == 401


def test_expired_token_is_anonymous(client, world, db):
    token = world["renter_headers"]["Authorization"].split(" ", 1)[1]
    auth_token = db.query(AuthToken).filter(AuthToken.token == token).first()
    auth_token.expires_at = datetime.utcnow() - timedelta(minutes=1)
    db.commit()

    response = client.get("/api/bookings/current", headers=world["renter_headers"])
    assert response.status_code == 401


def test_edit_booking(client, world):
    response = client.put(
        f"/api/bookings/{world['mine_id']}",
        json={"startDate": "2024-06-05", "endDate": "2024-06-10"},
        headers=world["renter_headers"],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == world["mine_id"]
    assert data["startDate"] == "2024-06-05"
    assert data["endDate"] == "2024-06-10"


def test_edit_booking_partial(client, world):
    response = client.put(
        f"/api/bookings/{world['mine_id']}",
        json={"endDate": "2024-07-09"},
        headers=world["renter_headers"],
    )

    assert response.status_code == 200
    assert response.json()["startDate"] == "2024-07-01"
    assert response.json()["endDate"] == "2024-07-09"


def test_edit_booking_conflict(client, world):
    response = client.put(
        f"/api/bookings/{world['mine_id']}",
        json={"startDate": "2024-06-04", "endDate": "2024-06-10"},
        headers=world["renter_headers"],
    )

    assert response.status_code == 403
    assert response.json() == {
        "message": "Sorry, this spot is already booked for the specified dates",
        "errors": {
            "startDate": "Start date conflicts with an existing booking",
            "endDate": "End date conflicts with an existing booking",
        },
    }


def test_edit_booking_past_start(client, world):
    response = client.put(
        f"/api/bookings/{world['mine_id']}",
        json={"startDate": "2024-05-01", "endDate": "2024-05-03"},
        headers=world["renter_headers"],
    )

    assert response.status_code == 400
    assert response.json() == {
        "message": "Bad Request",
        "errors": {"startDate": "startDate cannot be in the past"},
    }


def test_edit_booking_malformed_date(client, world):
    response = client.put(
        f"/api/bookings/{world['mine_id']}",
        json={"startDate": "next tuesday"},
        headers=world["renter_headers"],
    )

    assert response.status_code == 400
    assert "startDate" in response.json()["errors"]


def test_edit_booking_not_found(client, world):
    response = client.put(
        "/api/bookings/9999",
        json={"startDate": "2024-08-01", "endDate": "2024-08-03"},
        headers=world["renter_headers"],
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Booking couldn't be found"}


def test_edit_booking_by_spot_owner_is_forbidden(client, world):
    response = client.put(
        f"/api/bookings/{world['mine_id']}",
        json={"startDate": "2024-08-01", "endDate": "2024-08-03"},
        headers=world["owner_headers"],
    )

    assert response.status_code == 403
    assert response.json() == {"message": "Forbidden"}


def test_edit_booking_requires_authentication(client, world):
    response = client.put(
        f"/api/bookings/{world['mine_id']}",
        json={"startDate": "2024-08-01", "endDate": "2024-08-03"},
    )
    assert response.status_code == 401


def test_delete_booking_by_spot_owner(client, world, db):
    response = client.delete(f"/api/bookings/{world['mine_id']}", headers=world["owner_headers"])

    assert response.status_code == 200
    assert response.json() == {"message": "Successfully deleted"}
    db.expire_all()
    assert db.get(Booking, world["mine_id"]) is None


def test_delete_started_booking(client, world, db):
    started = make_booking(db, world["spot"], world["renter"], date(2024, 5, 10), date(2024, 5, 25))

    response = client.delete(f"/api/bookings/{started.id}", headers=world["renter_headers"])

    assert response.status_code == 403
    assert response.json() == {"message": "Bookings that have been started can't be deleted"}


def test_delete_booking_by_stranger(client, world, db):
    stranger = make_user(db, "stranger")
    response = client.delete(f"/api/bookings/{world['mine_id']}", headers=auth_headers(db, stranger))
    assert response.status_code == 403


def test_delete_missing_booking(client, world):
    response = client.delete("/api/bookings/9999", headers=world["renter_headers"])
    assert response.status_code == 404


def test_create_booking(client, world):
    response = client.post(
        f"/api/spots/{world['spot_id']}/bookings",
        json={"startDate": "2024-06-05", "endDate": "2024-06-07"},
        headers=world["renter_headers"],
    )

    assert response.status_code == 201
    data = response.json()
    assert data["spotId"] == world["spot_id"]
    assert data["userId"] == world["renter"].id


def test_create_booking_conflict(client, world):
    response = client.post(
        f"/api/spots/{world['spot_id']}/bookings",
        json={"startDate": "2024-06-02", "endDate": "2024-06-03"},
        headers=world["renter_headers"],
    )
    assert response.status_code == 403
    assert "errors" in response.json()


def test_create_booking_on_own_spot(client, world):
    response = client.post(
        f"/api/spots/{world['spot_id']}/bookings",
        json={"startDate": "2024-08-02", "endDate": "2024-08-03"},
        headers=world["owner_headers"],
    )
    assert response.status_code == 403


def test_create_booking_missing_spot(client, world):
    response = client.post(
        "/api/spots/9999/bookings",
        json={"startDate": "2024-08-02", "endDate": "2024-08-03"},
        headers=world["renter_headers"],
    )
    assert response.status_code == 404
    assert response.json() == {"message": "Spot couldn't be found"}


def test_create_booking_requires_both_dates(client, world):
    response = client.post(
        f"/api/spots/{world['spot_id']}/bookings",
        json={"startDate": "2024-08-02"},
        headers=world["renter_headers"],
    )
    assert response.status_code == 400
    assert "endDate" in response.json()["errors"]
