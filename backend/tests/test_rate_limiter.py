"""
Fixed-window rate limiter and edge middleware tests
- 100th request in a window allowed, 101st rejected
- after reset_time the counter restarts at 1
- 429 with Retry-After on /api/ paths only
- concurrent hits on one key never exceed the limit
- the sweep job runs once per window
- unhandled errors still get the envelope and security headers
"""
import asyncio
import threading
from datetime import timedelta

import pytest
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.testclient import TestClient

from middleware import EdgeMiddleware
from services.errors import StoreError
from services.rate_limiter import RateLimiter, client_key
from services.scheduler import start_scheduler, stop_scheduler


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(window_seconds=900, max_requests=100, clock=clock)


class TestRateLimiter:
    def test_hundredth_allowed_hundred_first_rejected(self, limiter):
        decisions = [limiter.hit("rate_limit:1.2.3.4") for _ in range(101)]
        assert all(d.allowed for d in decisions[:100])
        assert decisions[99].count == 100
        assert decisions[100].allowed is False
        assert decisions[100].retry_after == 900

    def test_rejected_requests_do_not_grow_count(self, limiter):
        for _ in range(105):
            last = limiter.hit("k")
        assert last.count == 100

    def test_resets_after_window(self, limiter, clock):
        for _ in range(101):
            limiter.hit("k")
        clock.now += 900
        assert limiter.hit("k").allowed is False, "still inside the window at exactly reset_time"

        clock.now += 1
        decision = limiter.hit("k")
        assert decision.allowed is True
        assert decision.count == 1
        assert decision.reset_time == clock.now + 900

    def test_keys_are_independent(self, limiter):
        for _ in range(100):
            limiter.hit("a")
        assert limiter.hit("a").allowed is False
        assert limiter.hit("b").allowed is True

    def test_sweep_drops_expired_records(self, limiter, clock):
        limiter.hit("old")
        clock.now += 600
        limiter.hit("fresh")
        clock.now += 301
        assert limiter.sweep() == 1
        assert len(limiter) == 1
        assert limiter.hit("fresh").count == 2

    def test_concurrent_hits_never_exceed_max(self):
        limiter = RateLimiter(window_seconds=900, max_requests=100)
        allowed = []

        def worker():
            for _ in range(50):
                allowed.append(limiter.hit("rate_limit:shared").allowed)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(allowed) == 400
        assert allowed.count(True) == 100, "exactly max_requests hits may pass in one window"


class TestSweepSchedule:
    def test_sweep_job_runs_every_window(self, limiter):
        runner = AsyncIOScheduler()

        async def start_and_read_job():
            start_scheduler(limiter, target=runner)
            try:
                return runner.get_job("rate_limit_sweep")
            finally:
                stop_scheduler(target=runner)

        job = asyncio.run(start_and_read_job())

        assert job is not None
        assert isinstance(job.trigger, IntervalTrigger)
        assert job.trigger.interval == timedelta(seconds=900)
        assert job.func == limiter.sweep
        assert runner.running is False


class TestClientKey:
    def test_first_forwarded_entry(self):
        assert client_key("203.0.113.7, 10.0.0.1", "10.0.0.2") == "rate_limit:203.0.113.7"

    def test_peer_address_fallback(self):
        assert client_key(None, "10.0.0.2") == "rate_limit:10.0.0.2"

    def test_unknown(self):
        assert client_key("", None) == "rate_limit:unknown"


class TestEdgeMiddleware:
    @pytest.fixture
    def small_app(self, clock):
        limiter = RateLimiter(window_seconds=900, max_requests=3, clock=clock)
        app = FastAPI()
        app.add_middleware(EdgeMiddleware, limiter=limiter)

        @app.get("/api/ping")
        async def ping():
            return {"ok": True}

        @app.post("/api/ping")
        async def post_ping():
            return {"ok": True}

        @app.get("/api/boom")
        async def boom():
            raise RuntimeError("unexpected")

        @app.get("/health")
        async def health():
            return {"ok": True}

        return app

    def test_429_with_retry_after(self, small_app):
        client = TestClient(small_app)
        for _ in range(3):
            assert client.get("/api/ping").status_code == 200

        res = client.get("/api/ping")
        assert res.status_code == 429
        assert res.headers["Retry-After"] == "900"
        assert res.json()["success"] is False
        assert res.headers["X-Frame-Options"] == "DENY"

    def test_forwarded_clients_counted_separately(self, small_app):
        client = TestClient(small_app)
        for _ in range(3):
            client.get("/api/ping", headers={"X-Forwarded-For": "1.1.1.1"})
        assert client.get("/api/ping", headers={"X-Forwarded-For": "1.1.1.1"}).status_code == 429
        assert client.get("/api/ping", headers={"X-Forwarded-For": "2.2.2.2"}).status_code == 200

    def test_non_api_paths_not_limited(self, small_app):
        client = TestClient(small_app)
        for _ in range(10):
            res = client.get("/health")
            assert res.status_code == 200
        assert res.headers["X-Content-Type-Options"] == "nosniff"

    def test_origin_mismatch_rejected(self, small_app):
        client = TestClient(small_app)
        res = client.post("/api/ping", headers={"Origin": "https://attacker.example"})
        assert res.status_code == 403

    def test_get_with_foreign_origin_allowed(self, small_app):
        client = TestClient(small_app)
        res = client.get("/api/ping", headers={"Origin": "https://attacker.example"})
        assert res.status_code == 200

    def test_post_without_origin_allowed(self, small_app):
        client = TestClient(small_app)
        assert client.post("/api/ping").status_code == 200

    def test_unhandled_error_is_secured_envelope(self, small_app):
        client = TestClient(small_app)
        res = client.get("/api/boom")
        assert res.status_code == 500
        assert res.json() == {"success": False, "error": StoreError.default_message}
        assert res.headers["X-Frame-Options"] == "DENY"
        assert res.headers["X-Content-Type-Options"] == "nosniff"
