"""
Tests for bulk seat generation: grid planning, batching and partial failure.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from cricket_tickets.core.config import get_settings
from cricket_tickets.core.exceptions import NotFoundError, ValidationFailedError
from cricket_tickets.repositories import SeatRepository
from cricket_tickets.schemas.venue import BulkSeatCreate
from cricket_tickets.services.seat_generation_service import generate_seats, plan_seat_grid


def test_plan_grid_labels():
    grid = plan_seat_grid("A", 1, 3, 2)
    assert grid == [
        ("A1", "1"), ("A1", "2"),
        ("A2", "1"), ("A2", "2"),
        ("A3", "1"), ("A3", "2"),
    ]


def test_plan_grid_accepts_numeric_text():
    assert plan_seat_grid("", " 4 ", "5", "1") == [("4", "1"), ("5", "1")]


@pytest.mark.parametrize("start, end, per_row", [
    (5, 3, 10),       # inverted bounds
    ("x", 3, 10),     # not a number
    (1, "3.5", 10),
    (1, 3, 0),
    (1, 3, -2),
])
def test_plan_grid_rejects_bad_bounds(start, end, per_row):
    with pytest.raises(ValidationFailedError):
        plan_seat_grid("A", start, end, per_row)


def test_plan_grid_rejects_oversized_grid():
    with pytest.raises(ValidationFailedError):
        plan_seat_grid("", 1, 101, 100, max_seats=10000)


@pytest.mark.asyncio
async def test_bulk_create_seats(client: AsyncClient, admin_headers, test_stand):
    response = await client.post(f"/api/v1/stands/{test_stand.id}/seats/bulk", json={
        "row_prefix": "A",
        "start_row": 1,
        "end_row": 3,
        "seats_per_row": 2,
    }, headers=admin_headers)
    assert response.status_code == 201
    assert response.json() == {"requested": 6, "created": 6, "error": None}

    response = await client.get(f"/api/v1/stands/{test_stand.id}/seats")
    labels = [(s["row_number"], s["seat_number"]) for s in response.json()]
    assert labels == [
        ("A1", "1"), ("A1", "2"),
        ("A2", "1"), ("A2", "2"),
        ("A3", "1"), ("A3", "2"),
    ]
    assert all(s["status"] == "available" for s in response.json())


@pytest.mark.asyncio
async def test_bulk_create_inverted_bounds_creates_nothing(client: AsyncClient, admin_headers, test_stand):
    stand_id = test_stand.id
    response = await client.post(f"/api/v1/stands/{stand_id}/seats/bulk", json={
        "start_row": 5,
        "end_row": 3,
        "seats_per_row": 10,
    }, headers=admin_headers)
    assert response.status_code == 400

    response = await client.get(f"/api/v1/stands/{stand_id}/seats")
    assert response.json() == []


@pytest.mark.asyncio
async def test_bulk_create_non_numeric_bounds(client: AsyncClient, admin_headers, test_stand):
    response = await client.post(f"/api/v1/stands/{test_stand.id}/seats/bulk", json={
        "start_row": "one",
        "end_row": "3",
        "seats_per_row": 10,
    }, headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_bulk_create_requires_admin(client: AsyncClient, auth_headers, test_stand):
    response = await client.post(f"/api/v1/stands/{test_stand.id}/seats/bulk", json={
        "start_row": 1,
        "end_row": 1,
        "seats_per_row": 1,
    }, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_bulk_create_in_missing_stand(db_session: AsyncSession):
    data = BulkSeatCreate(start_row=1, end_row=1, seats_per_row=1)
    with pytest.raises(NotFoundError):
        await generate_seats(db_session, "nope", data)


@pytest.mark.asyncio
async def test_generation_is_batched(db_session: AsyncSession, test_stand, monkeypatch):
    commits = []
    real_commit = AsyncSession.commit

    async def counting_commit(self):
        commits.append(1)
        await real_commit(self)

    monkeypatch.setattr(AsyncSession, "commit", counting_commit)

    data = BulkSeatCreate(row_prefix="R", start_row=1, end_row=5, seats_per_row=5)
    result = await generate_seats(db_session, test_stand.id, data, batch_size=10)

    assert result.created == 25
    assert len(commits) == 3


@pytest.mark.asyncio
async def test_failed_batch_keeps_earlier_batches(db_session: AsyncSession, test_stand, monkeypatch):
    stand_id = test_stand.id
    calls = []
    real_commit = AsyncSession.commit

    async def flaky_commit(self):
        calls.append(1)
        if len(calls) == 2:
            raise OperationalError("INSERT INTO seats", {}, Exception("database is locked"))
        await real_commit(self)

    monkeypatch.setattr(AsyncSession, "commit", flaky_commit)

    data = BulkSeatCreate(row_prefix="A", start_row=1, end_row=3, seats_per_row=2)
    result = await generate_seats(db_session, stand_id, data, batch_size=2)

    assert result.requested == 6
    assert result.created == 2
    assert result.error is not None
    assert result.error.startswith("Failed to add some seats")
    # The run stops at the first failure
    assert len(calls) == 2

    monkeypatch.undo()
    seats = await SeatRepository(db_session).list_by_stand(stand_id)
    assert [(s.row_number, s.seat_number) for s in seats] == [("A1", "1"), ("A1", "2")]


@pytest.mark.asyncio
async def test_partial_generation_returns_multi_status(
    client: AsyncClient, admin_headers, test_stand, monkeypatch
):
    monkeypatch.setattr(get_settings(), "SEAT_BATCH_SIZE", 2)
    calls = []
    real_commit = AsyncSession.commit

    async def flaky_commit(self):
        calls.append(1)
        if len(calls) == 3:
            raise OperationalError("INSERT INTO seats", {}, Exception("connection reset"))
        await real_commit(self)

    monkeypatch.setattr(AsyncSession, "commit", flaky_commit)

    response = await client.post(f"/api/v1/stands/{test_stand.id}/seats/bulk", json={
        "row_prefix": "A",
        "start_row": 1,
        "end_row": 3,
        "seats_per_row": 2,
    }, headers=admin_headers)

    assert response.status_code == 207
    data = response.json()
    assert data["requested"] == 6
    assert data["created"] == 4
    assert "Failed to add some seats" in data["error"]
