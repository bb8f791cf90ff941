"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags contention   # Many tenants, one room
  locust -f locustfile.py --tags throughput   # Listing cache and search
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from locust import HttpUser, task, between, tag, events

PASSWORD = "loadtest123"

# Shared state
LISTING_IDS = []
CONTENTION = {"listing_id": None, "room_id": None, "owner_headers": None}
PENDING_BOOKING_IDS = []


def random_email(prefix: str) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=10))
    return f"{prefix}_{suffix}@loadtest.example.com"


def sign_up(client, role: str) -> dict:
    """Register and log in a fresh account; returns auth headers or {}."""
    email = random_email(role)
    client.post("/api/v1/auth/register", json={
        "email": email,
        "full_name": f"Load {role.title()}",
        "password": PASSWORD,
        "role": role,
    })
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: the first owner creates a 6-bed contention room")
    print("=" * 60)


class ContentionOwner(HttpUser):
    """
    TEST 1: Contention - owner side

    Creates one listing with a 6-bed room, then keeps confirming pending
    requests. Confirms for a bed that is already taken must come back 409
    (AlreadyOccupied), never 200.

    After the run, verify:
      SELECT bed_id, COUNT(*) FROM bookings
      WHERE status = 'confirmed' GROUP BY bed_id HAVING COUNT(*) > 1;
    Should return no rows.
    """
    fixed_count = 1
    wait_time = between(0.05, 0.2)

    def on_start(self):
        self.headers = sign_up(self.client, "owner")
        if not self.headers or CONTENTION["room_id"]:
            return

        resp = self.client.post("/api/v1/listings/", json={
            "name": "Contention PG",
            "address": "1 Load Test Lane, Bengaluru",
            "price": 7000,
            "gender_preference": "any",
            "amenities": ["WiFi"],
        }, headers=self.headers)
        if resp.status_code != 201:
            return
        listing_id = resp.json()["id"]

        resp = self.client.post(f"/api/v1/listings/{listing_id}/rooms", json={
            "room_number": "A1",
            "total_beds": 6,
        }, headers=self.headers)
        if resp.status_code == 201:
            CONTENTION.update(listing_id=listing_id, room_id=resp.json()["id"], owner_headers=self.headers)
            LISTING_IDS.append(listing_id)
            print(f"\n✓ Created listing {listing_id} with room {CONTENTION['room_id']} (6 beds)\n")

    @tag("contention")
    @task
    def confirm_pending(self):
        if not PENDING_BOOKING_IDS or not CONTENTION["owner_headers"]:
            return
        booking_id = PENDING_BOOKING_IDS.pop(0)

        with self.client.patch(
            f"/api/v1/bookings/{booking_id}/status",
            json={"status": "confirmed"},
            headers=CONTENTION["owner_headers"],
            name="/api/v1/bookings/{id}/status [confirm]",
            catch_response=True,
        ) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: bed already taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ContentionTenant(HttpUser):
    """
    TEST 1: Contention - tenant side

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    Every tenant asks the selector for one bed of the shared room and
    requests it. Requests for beds that got confirmed in the meantime are
    refused with 409.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = sign_up(self.client, "tenant")

    @tag("contention")
    @task
    def request_offered_bed(self):
        room_id = CONTENTION["room_id"]
        if not room_id or not self.headers:
            return

        resp = self.client.get(
            f"/api/v1/rooms/{room_id}/beds/selection?required=1",
            name="/api/v1/rooms/{id}/beds/selection",
        )
        if resp.status_code != 200 or not resp.json()["bed_ids"]:
            return

        with self.client.post(
            "/api/v1/bookings/",
            json={
                "listing_id": CONTENTION["listing_id"],
                "room_id": room_id,
                "bed_ids": resp.json()["bed_ids"],
                "beds_required": 1,
            },
            headers=self.headers,
            catch_response=True,
        ) as booking_resp:
            if booking_resp.status_code == 201:
                PENDING_BOOKING_IDS.extend(b["id"] for b in booking_resp.json())
                booking_resp.success()
            elif booking_resp.status_code == 409:
                booking_resp.success()  # Expected: occupied or already requested
            else:
                booking_resp.failure(f"Unexpected: {booking_resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare avg response time, requests/sec and P95/P99 latency.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_listings_cached(self):
        page = random.randint(1, 5)
        resp = self.client.get(
            f"/api/v1/listings/?page={page}&page_size=20",
            name="/api/v1/listings/ [cached]",
        )
        if resp.status_code == 200:
            for listing in resp.json().get("listings", []):
                if listing["id"] not in LISTING_IDS:
                    LISTING_IDS.append(listing["id"])

    @tag("throughput", "read")
    @task(5)
    def search(self):
        params = {
            "min_price": random.choice([0, 3000, 6000]),
            "max_price": random.choice([8000, 12000, 15000]),
            "gender_preference": random.choice(["", "male", "female", "any"]),
        }
        self.client.get("/api/v1/listings/search", params=params, name="/api/v1/listings/search")

    @tag("throughput", "read")
    @task(3)
    def get_listing_rooms(self):
        if LISTING_IDS:
            listing_id = random.choice(LISTING_IDS)
            self.client.get(f"/api/v1/listings/{listing_id}/rooms", name="/api/v1/listings/{id}/rooms")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = sign_up(self.client, "tenant")

    def expect(self, resp, allowed):
        if resp.status_code in allowed:
            resp.success()
        else:
            resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_listing(self):
        with self.client.post("/api/v1/bookings/",
            json={"listing_id": 999999, "beds_required": 0},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self.expect(resp, [404])

    @tag("edge")
    @task
    def too_many_beds(self):
        with self.client.post("/api/v1/bookings/",
            json={"listing_id": 1, "room_id": 1, "bed_ids": [1], "beds_required": 99},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self.expect(resp, [422])

    @tag("edge")
    @task
    def unknown_status(self):
        with self.client.patch("/api/v1/bookings/1/status",
            json={"status": "cancelled"},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self.expect(resp, [422])

    @tag("edge")
    @task
    def inverted_price_range(self):
        with self.client.get("/api/v1/listings/search?min_price=9000&max_price=10",
            catch_response=True,
        ) as resp:
            self.expect(resp, [422])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self.expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/bookings/",
            json={"listing_id": 1},
            catch_response=True,
        ) as resp:
            self.expect(resp, [401])
