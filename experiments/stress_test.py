#!/usr/bin/env python3
"""
Simple stress test for the Cricket Ticket Booking API.
Many fans try to book the same seat at once; at most one may win.

The admin account must be listed in ADMIN_EMAILS on the server.
"""

import asyncio
import os
import time
from datetime import datetime, timezone, timedelta
from typing import Optional

import aiohttp

API_URL = os.environ.get("API_URL", "http://localhost:8000")
ADMIN_EMAIL = os.environ.get("LOAD_ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("LOAD_ADMIN_PASSWORD", "adminpassword123")
CONCURRENT_USERS = 50


class StressTest:
    def __init__(self):
        self.results = {
            "successful_bookings": 0,
            "failed_bookings": 0,
            "conflicts": 0,
            "errors": 0,
            "response_times": []
        }
        self.match_id = None
        self.seat_id = None
        self.tokens = []

    async def login(self, session: aiohttp.ClientSession, email: str, password: str) -> Optional[str]:
        async with session.post(f"{API_URL}/api/v1/auth/login", json={
            "email": email,
            "password": password
        }) as resp:
            if resp.status == 200:
                data = await resp.json()
                return data["access_token"]
        return None

    async def register_and_login(self, session: aiohttp.ClientSession, user_num: int) -> Optional[str]:
        """Register a fan and return auth token."""
        stamp = int(time.time())
        email = f"stress_test_{user_num}_{stamp}@test.com"
        password = "test12345"

        await session.post(f"{API_URL}/api/v1/auth/register", json={
            "email": email,
            "username": f"stress_{user_num}_{stamp}",
            "password": password
        })
        return await self.login(session, email, password)

    async def create_test_match(self, session: aiohttp.ClientSession):
        """Create a stadium with a single one-seat stand and an upcoming match."""
        await session.post(f"{API_URL}/api/v1/auth/register", json={
            "email": ADMIN_EMAIL,
            "username": "stress_admin",
            "password": ADMIN_PASSWORD
        })
        token = await self.login(session, ADMIN_EMAIL, ADMIN_PASSWORD)
        if not token:
            return
        headers = {"Authorization": f"Bearer {token}"}
        stamp = int(time.time())

        async with session.post(f"{API_URL}/api/v1/stadiums", json={
            "name": f"Stress Ground {stamp}",
            "location": "Test",
            "capacity": 1
        }, headers=headers) as resp:
            stadium = await resp.json()

        async with session.post(f"{API_URL}/api/v1/stadiums/{stadium['id']}/stands", json={
            "name": "Single Seat Stand",
            "category": "general",
            "capacity": 1,
            "base_price": "100.00"
        }, headers=headers) as resp:
            stand = await resp.json()

        async with session.post(f"{API_URL}/api/v1/stands/{stand['id']}/seats", json={
            "row_number": "A",
            "seat_number": "1"
        }, headers=headers) as resp:
            seat = await resp.json()

        async with session.post(f"{API_URL}/api/v1/matches", json={
            "stadium_id": stadium["id"],
            "team_a": "Stress",
            "team_b": "Test",
            "match_date": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
        }, headers=headers) as resp:
            if resp.status == 201:
                match = await resp.json()
                self.match_id = match["id"]
                self.seat_id = seat["id"]
                print(f"✓ Created match {self.match_id} with one seat")

    async def book_seat(self, session: aiohttp.ClientSession, token: str, user_num: int):
        """Attempt to book the contested seat."""
        headers = {"Authorization": f"Bearer {token}"}
        start = time.time()

        try:
            async with session.post(f"{API_URL}/api/v1/bookings",
                json={"match_id": self.match_id, "seat_id": self.seat_id},
                headers=headers
            ) as resp:
                elapsed = (time.time() - start) * 1000
                self.results["response_times"].append(elapsed)

                if resp.status == 201:
                    self.results["successful_bookings"] += 1
                    print(f"✓ User {user_num} booked seat ({elapsed:.0f}ms)")
                elif resp.status == 409:
                    self.results["conflicts"] += 1
                    print(f"✗ User {user_num} conflict - seat taken ({elapsed:.0f}ms)")
                else:
                    self.results["failed_bookings"] += 1
                    print(f"✗ User {user_num} failed: {resp.status} ({elapsed:.0f}ms)")
        except aiohttp.ClientError as e:
            self.results["errors"] += 1
            print(f"✗ User {user_num} error: {e}")

    async def run(self):
        """Execute the stress test."""
        print(f"\n{'='*60}")
        print(f"STRESS TEST: {CONCURRENT_USERS} users → 1 seat")
        print(f"{'='*60}\n")

        async with aiohttp.ClientSession() as session:
            print("Phase 1: Setting up users...")
            setup_tasks = [self.register_and_login(session, i) for i in range(CONCURRENT_USERS)]
            self.tokens = [t for t in await asyncio.gather(*setup_tasks) if t]
            print(f"✓ Created {len(self.tokens)} users\n")

            if not self.tokens:
                print("✗ Failed to create users")
                return

            print("Phase 2: Creating test match...")
            await self.create_test_match(session)
            if not self.match_id:
                print("✗ Failed to create match (is the admin email in ADMIN_EMAILS?)")
                return
            print()

            print(f"Phase 3: {len(self.tokens)} users booking simultaneously...")
            print("-" * 60)
            start_time = time.time()

            booking_tasks = [self.book_seat(session, token, i) for i, token in enumerate(self.tokens)]
            await asyncio.gather(*booking_tasks)

            total_time = time.time() - start_time

            print("\n" + "="*60)
            print("RESULTS")
            print("="*60)
            print(f"Total time:          {total_time:.2f}s")
            print(f"Successful bookings: {self.results['successful_bookings']}")
            print(f"Conflicts (409):     {self.results['conflicts']}")
            print(f"Failed bookings:     {self.results['failed_bookings']}")
            print(f"Errors:              {self.results['errors']}")

            if self.results["response_times"]:
                times = sorted(self.results["response_times"])
                print("\nResponse times:")
                print(f"  Avg: {sum(times)/len(times):.0f}ms")
                print(f"  P50: {times[len(times)//2]:.0f}ms")
                print(f"  P95: {times[int(len(times)*0.95)]:.0f}ms")
                print(f"  P99: {times[int(len(times)*0.99)]:.0f}ms")

            print("\n" + "="*60)
            if self.results["successful_bookings"] <= 1:
                print("✓ PASS: No double booking detected!")
                print(f"  {self.results['successful_bookings']} booking(s) for 1 seat")
            else:
                print("✗ FAIL: DOUBLE BOOKING DETECTED!")
                print(f"  {self.results['successful_bookings']} bookings for 1 seat")
            print("="*60 + "\n")


if __name__ == "__main__":
    test = StressTest()
    asyncio.run(test.run())
