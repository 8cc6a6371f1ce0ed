"""
Locust Load Test Suite

Setup registers an admin (its email must be listed in ADMIN_EMAILS on the
server), builds a stadium with one stand of RACE_SEATS seats and an upcoming
match, then lets the user classes loose on it.

Run scenarios:
  locust -f locustfile.py --tags race         # Many fans, few seats
  locust -f locustfile.py --tags throughput   # Cached match listing
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests

Environment:
  LOAD_ADMIN_EMAIL     (default admin@example.com)
  LOAD_ADMIN_PASSWORD  (default adminpassword123)
  RACE_SEATS           (default 10)
"""

import os
import random
import string
from datetime import datetime, timezone, timedelta

import requests
from locust import HttpUser, task, between, tag, events

ADMIN_EMAIL = os.environ.get("LOAD_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("LOAD_ADMIN_PASSWORD", "adminpassword123")
RACE_SEATS = int(os.environ.get("RACE_SEATS", "10"))

# Shared state, filled in by on_test_start
VENUE = {"match_id": None, "stand_id": None, "seat_ids": []}


def random_email():
    return f"load_{random.randint(10000, 99999)}_{random.randint(0, 9999)}@example.com"


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def _admin_headers(base_url: str) -> dict:
    requests.post(f"{base_url}/api/v1/auth/register", json={
        "email": ADMIN_EMAIL,
        "username": "load_admin",
        "password": ADMIN_PASSWORD,
    })
    resp = requests.post(f"{base_url}/api/v1/auth/login", json={
        "email": ADMIN_EMAIL,
        "password": ADMIN_PASSWORD,
    })
    resp.raise_for_status()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    """Setup: one stand of RACE_SEATS seats for one upcoming match."""
    base_url = environment.host
    print("\n" + "=" * 60)
    print(f"SETUP: building a stand with {RACE_SEATS} seats...")
    print("=" * 60)

    headers = _admin_headers(base_url)
    stadium = requests.post(f"{base_url}/api/v1/stadiums", json={
        "name": f"Load Test Ground {random.randint(1, 10000)}",
        "location": "Test",
        "capacity": 1000,
    }, headers=headers).json()
    stand = requests.post(f"{base_url}/api/v1/stadiums/{stadium['id']}/stands", json={
        "name": "Race Stand",
        "category": "general",
        "capacity": RACE_SEATS,
        "base_price": "100.00",
    }, headers=headers).json()
    requests.post(f"{base_url}/api/v1/stands/{stand['id']}/seats/bulk", json={
        "row_prefix": "R",
        "start_row": 1,
        "end_row": 1,
        "seats_per_row": RACE_SEATS,
    }, headers=headers).raise_for_status()
    match = requests.post(f"{base_url}/api/v1/matches", json={
        "stadium_id": stadium["id"],
        "team_a": "Load",
        "team_b": "Test",
        "match_date": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
    }, headers=headers).json()

    seats = requests.get(f"{base_url}/api/v1/stands/{stand['id']}/seats").json()
    VENUE.update(match_id=match["id"], stand_id=stand["id"], seat_ids=[s["id"] for s in seats])
    print(f"\n✓ Match {match['id']} with {len(seats)} seats\n")


class _SignedInUser(HttpUser):
    abstract = True

    def on_start(self):
        email = random_email()
        self.client.post("/api/v1/auth/register", json={
            "email": email,
            "username": random_username(),
            "password": "test12345",
        })
        resp = self.client.post("/api/v1/auth/login", json={
            "email": email,
            "password": "test12345",
        })
        if resp.status_code == 200:
            self.headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
        else:
            self.headers = {}


class RaceUser(_SignedInUser):
    """
    TEST 1: Race - many fans press "book" on the same few seats

    Run: locust -f locustfile.py --tags race -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT match_seat_id, COUNT(*) FROM bookings
      WHERE booking_status = 'confirmed' GROUP BY match_seat_id HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    @tag("race")
    @task
    def book_contested_seat(self):
        if not VENUE["seat_ids"] or not self.headers:
            return

        with self.client.post("/api/v1/bookings",
            json={"match_id": VENUE["match_id"], "seat_id": random.choice(VENUE["seat_ids"])},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409 and "seat_map" in resp.json():
                resp.success()  # Expected: seat taken, fresh map returned
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: Stop Redis, run again

    Compare avg response time, requests/sec and P95/P99 latency of the
    cached listing against the never-cached seat map.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_matches_cached(self):
        self.client.get("/api/v1/matches", name="/api/v1/matches [cached]")

    @tag("throughput", "read")
    @task(5)
    def seat_map(self):
        if VENUE["match_id"]:
            self.client.get(
                f"/api/v1/matches/{VENUE['match_id']}/stands/{VENUE['stand_id']}/seats",
                name="/api/v1/matches/{id}/stands/{id}/seats",
            )

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(_SignedInUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_match_seat(self):
        with self.client.post("/api/v1/bookings",
            json={"match_seat_id": "00000000-0000-0000-0000-000000000000"},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def missing_target(self):
        with self.client.post("/api/v1/bookings",
            json={"match_id": VENUE["match_id"]},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/bookings",
            json={"match_id": VENUE["match_id"], "seat_id": "x"},
            catch_response=True,
        ) as resp:
            self._expect(resp, [401])

    @tag("edge")
    @task
    def pricing_as_fan(self):
        with self.client.post(
            f"/api/v1/matches/{VENUE['match_id']}/stands/{VENUE['stand_id']}/pricing/multiplier",
            json={"multiplier": "10"},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [403])


class RealisticUser(_SignedInUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some bookings, the odd look at "my bookings".
    """
    wait_time = between(1, 3)

    @task(50)
    def browse_matches(self):
        self.client.get("/api/v1/matches")

    @task(20)
    def view_seat_map(self):
        if VENUE["match_id"]:
            self.client.get(
                f"/api/v1/matches/{VENUE['match_id']}/stands/{VENUE['stand_id']}/seats",
                name="/api/v1/matches/{id}/stands/{id}/seats",
            )

    @task(10)
    def book_seat(self):
        if VENUE["seat_ids"] and self.headers:
            self.client.post("/api/v1/bookings",
                json={"match_id": VENUE["match_id"], "seat_id": random.choice(VENUE["seat_ids"])},
                headers=self.headers,
                name="/api/v1/bookings")

    @task(5)
    def my_bookings(self):
        if self.headers:
            self.client.get("/api/v1/bookings", headers=self.headers)
