"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Direct bookings racing for 10 seats
  locust -f locustfile.py --tags checkout     # Cart checkouts racing for 10 seats
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
import uuid
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

# Shared state
PACKAGE_IDS = []
LIMITED_PACKAGE_ID = None


def random_email():
    return f"load_{uuid.uuid4().hex[:10]}@test.com"


def create_customer(client):
    resp = client.post("/api/v1/customers/", json={
        "first_name": "Load",
        "last_name": "Tester",
        "email": random_email(),
    }, name="/api/v1/customers/")
    return resp.json()["id"] if resp.status_code == 201 else None


def ensure_limited_package(client):
    """Create one destination and a 10-seat package shared by every user."""
    global LIMITED_PACKAGE_ID
    if LIMITED_PACKAGE_ID:
        return LIMITED_PACKAGE_ID

    resp = client.post("/api/v1/destinations/", json={
        "country_name": "Loadland",
        "city": "Stress City",
        "iso_code": "LL",
        "default_currency": "EUR",
    })
    if resp.status_code != 201:
        return None

    start = date.today() + timedelta(days=30)
    resp = client.post("/api/v1/packages/", json={
        "destination_id": resp.json()["id"],
        "title": "Concurrency Test Package",
        "description": "10 seats only",
        "base_price": "100.00",
        "start_date": start.isoformat(),
        "end_date": (start + timedelta(days=5)).isoformat(),
        "seat_count": 10,
    })
    if resp.status_code == 201 and not LIMITED_PACKAGE_ID:
        LIMITED_PACKAGE_ID = resp.json()["id"]
        print(f"\n✓ Created package {LIMITED_PACKAGE_ID} with 10 seats\n")
    return LIMITED_PACKAGE_ID


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "="*60)
    print("SETUP: Users create the shared 10-seat package on start")
    print("  Verify afterwards: GET /api/v1/packages/{id}/audit")
    print("="*60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 customers → 10 seats

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      GET /api/v1/packages/{id}/audit  →  consistent: true, available_seats: 0
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.customer_id = create_customer(self.client)
        ensure_limited_package(self.client)

    @tag("concurrency")
    @task
    def book_limited_seats(self):
        """All customers fight for the same 10 seats."""
        if not LIMITED_PACKAGE_ID or not self.customer_id:
            return

        with self.client.post("/api/v1/bookings/",
            json={"customer_id": self.customer_id, "package_id": LIMITED_PACKAGE_ID, "people_count": 1},
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409 expected once sold out
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class CheckoutUser(HttpUser):
    """
    TEST 2: Checkout race - each user stages 2 seats and checks out

    Run: locust -f locustfile.py --tags checkout -u 50 -r 25 --run-time 30s

    At most 5 checkouts can succeed; the rest must fail with 409 and
    never drive available_seats below zero.
    """
    wait_time = between(0, 0.2)

    def on_start(self):
        self.email = random_email()
        ensure_limited_package(self.client)

    @tag("checkout")
    @task
    def stage_and_checkout(self):
        if not LIMITED_PACKAGE_ID:
            return

        self.client.post("/api/v1/cart/items",
            json={"package_id": LIMITED_PACKAGE_ID, "people_count": 2})

        with self.client.post("/api/v1/cart/checkout",
            json={"email": self.email},
            catch_response=True
        ) as resp:
            if resp.status_code in (200, 409):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

        # Start the next round with an empty cart
        self.client.delete(f"/api/v1/cart/items/{LIMITED_PACKAGE_ID}",
            name="/api/v1/cart/items/{package_id}")


class ThroughputUser(HttpUser):
    """
    TEST 3: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_packages_cached(self):
        """Hammer the cached endpoint."""
        resp = self.client.get("/api/v1/packages/", name="/api/v1/packages/ [cached]")
        if resp.status_code == 200:
            for package in resp.json().get("packages", []):
                if package["id"] not in PACKAGE_IDS:
                    PACKAGE_IDS.append(package["id"])

    @tag("throughput", "read")
    @task(3)
    def remaining_seats(self):
        """Live seat counts are never cached."""
        if PACKAGE_IDS:
            self.client.get(f"/api/v1/packages/{random.choice(PACKAGE_IDS)}/remaining",
                name="/api/v1/packages/{id}/remaining")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 4: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.customer_id = create_customer(self.client) or str(uuid.uuid4())
        self.package_id = ensure_limited_package(self.client) or str(uuid.uuid4())

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_package_id(self):
        with self.client.post("/api/v1/bookings/",
            json={"customer_id": self.customer_id, "package_id": str(uuid.uuid4()), "people_count": 1},
            catch_response=True
        ) as resp:
            self._expect(resp, (404,))

    @tag("edge")
    @task
    def non_positive_people(self):
        with self.client.post("/api/v1/bookings/",
            json={"customer_id": self.customer_id, "package_id": self.package_id,
                  "people_count": random.choice([0, -5])},
            catch_response=True
        ) as resp:
            self._expect(resp, (422,))

    @tag("edge")
    @task
    def huge_party(self):
        with self.client.post("/api/v1/bookings/",
            json={"customer_id": self.customer_id, "package_id": self.package_id, "people_count": 999999},
            catch_response=True
        ) as resp:
            self._expect(resp, (404, 409))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings/",
            data="not json at all",
            catch_response=True
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def empty_cart_checkout(self):
        with self.client.post("/api/v1/cart/checkout",
            json={"email": random_email()},
            catch_response=True
        ) as resp:
            self._expect(resp, (400,))


class RealisticUser(HttpUser):
    """
    TEST 5: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing
      - Some carts and checkouts
      - Rare direct bookings
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.email = random_email()
        self.customer_id = create_customer(self.client)

    @task(50)
    def browse_packages(self):
        resp = self.client.get("/api/v1/packages/")
        if resp.status_code == 200:
            for package in resp.json().get("packages", []):
                if package["id"] not in PACKAGE_IDS:
                    PACKAGE_IDS.append(package["id"])

    @task(20)
    def view_package(self):
        if PACKAGE_IDS:
            self.client.get(f"/api/v1/packages/{random.choice(PACKAGE_IDS)}",
                name="/api/v1/packages/{id}")

    @task(10)
    def cart_checkout(self):
        if not PACKAGE_IDS:
            return
        for package_id in random.sample(PACKAGE_IDS, k=min(2, len(PACKAGE_IDS))):
            self.client.post("/api/v1/cart/items",
                json={"package_id": package_id, "people_count": random.randint(1, 3)})
        self.client.post("/api/v1/cart/checkout", json={"email": self.email})

    @task(3)
    def book_directly(self):
        if PACKAGE_IDS and self.customer_id:
            self.client.post("/api/v1/bookings/",
                json={"customer_id": self.customer_id, "package_id": random.choice(PACKAGE_IDS),
                      "people_count": random.randint(1, 3)})
