"""
Tests for match endpoints and the per-match seat map.
"""

from datetime import datetime, timezone, timedelta
from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from cricket_tickets.models import MatchSeat, Seat, Stadium, Stand
from cricket_tickets.services.availability_service import effective_seat_state


def _match_payload(stadium_id: str, days: int = 7, **overrides) -> dict:
    payload = {
        "stadium_id": stadium_id,
        "team_a": "India",
        "team_b": "England",
        "match_date": (datetime.now(timezone.utc) + timedelta(days=days)).isoformat(),
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_create_match(client: AsyncClient, admin_headers, test_stadium):
    response = await client.post(
        "/api/v1/matches", json=_match_payload(test_stadium.id), headers=admin_headers
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "upcoming"
    assert data["stadium_id"] == test_stadium.id


@pytest.mark.asyncio
async def test_create_match_in_missing_stadium(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/v1/matches", json=_match_payload("nope"), headers=admin_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_match_requires_admin(client: AsyncClient, auth_headers, test_stadium):
    response = await client.post(
        "/api/v1/matches", json=_match_payload(test_stadium.id), headers=auth_headers
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_public_listing_is_upcoming_soonest_first(client: AsyncClient, admin_headers, test_stadium):
    for days, team in ((20, "Late"), (3, "Soon"), (10, "Middle")):
        await client.post(
            "/api/v1/matches",
            json=_match_payload(test_stadium.id, days=days, team_a=team),
            headers=admin_headers,
        )
    await client.post(
        "/api/v1/matches",
        json=_match_payload(test_stadium.id, days=1, team_a="Done", status="completed"),
        headers=admin_headers,
    )

    response = await client.get("/api/v1/matches")
    assert response.status_code == 200
    data = response.json()
    assert data["cached"] is False
    assert data["total"] == 3
    assert [m["team_a"] for m in data["matches"]] == ["Soon", "Middle", "Late"]


@pytest.mark.asyncio
async def test_admin_listing_is_newest_first(client: AsyncClient, admin_headers, test_stadium):
    for days, team in ((3, "Soon"), (20, "Late")):
        await client.post(
            "/api/v1/matches",
            json=_match_payload(test_stadium.id, days=days, team_a=team, status="completed"),
            headers=admin_headers,
        )

    response = await client.get("/api/v1/matches/all", headers=admin_headers)
    assert response.status_code == 200
    assert [m["team_a"] for m in response.json()] == ["Late", "Soon"]


@pytest.mark.asyncio
async def test_update_match_status(client: AsyncClient, admin_headers, test_match):
    response = await client.patch(
        f"/api/v1/matches/{test_match.id}", json={"status": "ongoing"}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["status"] == "ongoing"


@pytest.mark.asyncio
async def test_move_match_with_bookings_is_rejected(
    client: AsyncClient, db_session, admin_headers, auth_headers, test_match, test_seats
):
    other = Stadium(name="Chepauk", location="Chennai", capacity=38000)
    db_session.add(other)
    await db_session.commit()

    await client.post(
        "/api/v1/bookings",
        json={"match_id": test_match.id, "seat_id": test_seats[0].id},
        headers=auth_headers,
    )
    response = await client.patch(
        f"/api/v1/matches/{test_match.id}", json={"stadium_id": other.id}, headers=admin_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_match_with_bookings_is_rejected(
    client: AsyncClient, admin_headers, auth_headers, test_match, test_seats
):
    await client.post(
        "/api/v1/bookings",
        json={"match_id": test_match.id, "seat_id": test_seats[0].id},
        headers=auth_headers,
    )
    response = await client.delete(f"/api/v1/matches/{test_match.id}", headers=admin_headers)
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_delete_priced_match(client: AsyncClient, admin_headers, test_match, test_stand, test_seats):
    response = await client.post(
        f"/api/v1/matches/{test_match.id}/stands/{test_stand.id}/pricing/multiplier",
        json={"multiplier": "2"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    response = await client.delete(f"/api/v1/matches/{test_match.id}", headers=admin_headers)
    assert response.status_code == 204
    response = await client.get(f"/api/v1/matches/{test_match.id}")
    assert response.status_code == 404


# Availability

@pytest.mark.asyncio
async def test_match_stands(client: AsyncClient, test_match, test_stand):
    response = await client.get(f"/api/v1/matches/{test_match.id}/stands")
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [test_stand.id]


@pytest.mark.asyncio
async def test_seat_map_defaults_to_base_price(client: AsyncClient, test_match, test_stand, test_seats):
    response = await client.get(f"/api/v1/matches/{test_match.id}/stands/{test_stand.id}/seats")
    assert response.status_code == 200
    data = response.json()
    assert data["stand_name"] == "North Stand"
    assert [row["row_number"] for row in data["rows"]] == ["A", "B"]

    seats = [seat for row in data["rows"] for seat in row["seats"]]
    assert len(seats) == 6
    assert [s["seat_number"] for s in data["rows"][0]["seats"]] == ["1", "2", "3"]
    for seat in seats:
        assert Decimal(seat["price"]) == Decimal("100.00")
        assert seat["status"] == "available"
        assert seat["match_seat_id"] is None


@pytest.mark.asyncio
async def test_seat_map_shows_blocked_physical_seat(
    client: AsyncClient, db_session, test_match, test_stand, test_seats
):
    test_seats[1].status = "blocked"
    await db_session.commit()

    response = await client.get(f"/api/v1/matches/{test_match.id}/stands/{test_stand.id}/seats")
    statuses = [seat["status"] for seat in response.json()["rows"][0]["seats"]]
    assert statuses == ["available", "blocked", "available"]


@pytest.mark.asyncio
async def test_seat_map_rejects_stand_of_other_stadium(client: AsyncClient, db_session, test_match):
    elsewhere = Stadium(name="Gabba", location="Brisbane", capacity=42000)
    db_session.add(elsewhere)
    await db_session.commit()
    stand = Stand(stadium_id=elsewhere.id, name="East", category="general", capacity=10, base_price=Decimal("10"))
    db_session.add(stand)
    await db_session.commit()

    response = await client.get(f"/api/v1/matches/{test_match.id}/stands/{stand.id}/seats")
    assert response.status_code == 404


def test_effective_state_prefers_persisted_row():
    stand = Stand(base_price=Decimal("100.00"))
    seat = Seat(status="available")

    default = effective_seat_state(seat, stand, None)
    assert default.price == Decimal("100.00")
    assert default.status == "available"
    assert default.match_seat_id is None

    persisted = MatchSeat(id="ms-1", price=Decimal("75.00"), status="blocked")
    state = effective_seat_state(seat, stand, persisted)
    assert (state.price, state.status, state.match_seat_id) == (Decimal("75.00"), "blocked", "ms-1")


@pytest.mark.asyncio
async def test_reading_the_seat_map_writes_nothing(client: AsyncClient, db_session, test_match, test_stand, test_seats):
    await client.get(f"/api/v1/matches/{test_match.id}/stands/{test_stand.id}/seats")

    count = (await db_session.execute(select(func.count()).select_from(MatchSeat))).scalar_one()
    assert count == 0