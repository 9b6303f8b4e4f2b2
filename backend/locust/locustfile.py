"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double-booking of seats
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import json
import random
import string
from locust import HttpUser, task, between, tag, events

CONTENDED_MOVIE = "Concurrency Test Screening"
CONTENDED_TIME = "2030-01-01T20:00"
CONTENDED_SEATS = 10


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def random_screening_time():
    return f"2030-{random.randint(1, 12):02d}-{random.randint(1, 28):02d}T{random.randint(10, 23):02d}:00"


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "="*60)
    print(f"Contended screening: {CONTENDED_MOVIE} @ {CONTENDED_TIME}, {CONTENDED_SEATS} seats")
    print("="*60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 users -> 10 seats of one screening

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify no seat is held twice:
      SELECT seat_index, COUNT(*) FROM occupied_seats
      WHERE movie_title = 'Concurrency Test Screening' GROUP BY seat_index HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.username = random_username()
        self.client.post("/api/signin", data={"username": self.username, "password": "test123"})

    @tag("concurrency")
    @task
    def book_contended_seat(self):
        """All users fight for the same 10 seats."""
        seat = random.randrange(CONTENDED_SEATS)
        with self.client.post("/api/book",
            data={
                "user": self.username,
                "movie": CONTENDED_MOVIE,
                "screening_time": CONTENDED_TIME,
                "seats_count": "1",
                "total": "12.50",
                "seats_indices": json.dumps([seat]),
            },
            name="/api/book [contended]",
            catch_response=True
        ) as resp:
            if resp.status_code == 200:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: seat taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class EdgeCaseUser(HttpUser):
    """
    TEST 2: Edge cases - Bad input handling

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
    def missing_screening_time(self):
        with self.client.post("/api/book",
            data={"user": "edge", "movie": "Edge", "seats_indices": "[1]"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def malformed_seat_list(self):
        with self.client.post("/api/book",
            data={"user": "edge", "movie": "Edge", "screening_time": CONTENDED_TIME,
                  "seats_indices": "not json"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def cancel_nothing(self):
        with self.client.request("DELETE", "/api/cancel",
            data={"user": random_username(), "movie": "Edge", "time": CONTENDED_TIME},
            catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def wrong_password(self):
        username = random_username()
        self.client.post("/api/signin", data={"username": username, "password": "right"})
        with self.client.post("/api/signin",
            data={"username": username, "password": "wrong"},
            catch_response=True
        ) as resp:
            self._expect(resp, [401])

    @tag("edge")
    @task
    def unknown_endpoint(self):
        with self.client.get("/api/bookings", catch_response=True) as resp:
            self._expect(resp, [404])


class RealisticUser(HttpUser):
    """
    TEST 3: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Each user signs in once, then books and occasionally cancels.
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.username = random_username()
        self.bookings = []
        self.client.post("/api/signin", data={"username": self.username, "password": "test123"})

    @task(10)
    def book_seats(self):
        movie = random.choice(["Dune", "Arrival", "Heat", "Alien"])
        screening_time = random_screening_time()
        seats = random.sample(range(200), random.randint(1, 3))
        resp = self.client.post("/api/book", data={
            "user": self.username,
            "movie": movie,
            "screening_time": screening_time,
            "seats_count": str(len(seats)),
            "total": f"{12.5 * len(seats):.2f}",
            "seats_indices": json.dumps(seats),
        })
        if resp.status_code == 200:
            self.bookings.append((movie, screening_time))

    @task(3)
    def cancel_booking(self):
        if not self.bookings:
            return
        movie, screening_time = self.bookings.pop()
        self.client.request("DELETE", "/api/cancel",
            data={"user": self.username, "movie": movie, "time": screening_time})

    @task(1)
    def preflight(self):
        self.client.options("/api/book")
