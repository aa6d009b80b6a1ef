"""Tests for the sliding-window rate limiter."""

import pytest
from fastapi.testclient import TestClient

from projecthub.db import Base
from projecthub.main import create_app
from projecthub.middleware.rate_limit import RateLimitMiddleware, RateLimitRule, default_rules
from tests.helpers import make_settings


@pytest.fixture()
def limited_client():
    def _build(**limits):
        app = create_app(make_settings(**limits))
        Base.metadata.create_all(bind=app.state.engine)
        built.append(app)
        return TestClient(app, raise_server_exceptions=False)

    built = []
    yield _build
    for app in built:
        app.state.engine.dispose()


class TestRateLimitRule:
    def test_global_rule_skips_auth_routes(self):
        rule = default_rules(make_settings())[0]
        assert rule.matches("GET", "/teams/all")
        assert not rule.matches("POST", "/auth/login")

    def test_method_filter(self):
        rule = RateLimitRule(name="login", limit=1, window_seconds=60, path_prefix="/auth/login", methods=frozenset({"POST"}))
        assert rule.matches("POST", "/auth/login")
        assert not rule.matches("GET", "/auth/login")


class TestRateLimitMiddleware:
    def test_login_attempts_are_limited(self, limited_client):
        client = limited_client(login_rate_limit=2)
        body = {"email": "nobody@example.com", "password": "Secret123!"}
        assert client.post("/auth/login", json=body).status_code == 401
        assert client.post("/auth/login", json=body).status_code == 401
        response = client.post("/auth/login", json=body)
        assert response.status_code == 429
        assert response.json() == {
            "success": False,
            "message": "Too many login attempts, please try again in 15 minutes",
        }
        assert "Retry-After" in response.headers

    def test_register_limit_is_separate_from_login(self, limited_client):
        client = limited_client(login_rate_limit=1, register_rate_limit=1)
        assert client.post("/auth/login", json={}).status_code == 422
        response = client.post("/auth/register", json={})
        assert response.status_code == 422
        assert client.post("/auth/register", json={}).status_code == 429

    def test_global_limit_applies_to_api_routes(self, limited_client):
        client = limited_client(api_rate_limit=2)
        assert client.get("/teams/all").status_code == 401
        assert client.get("/teams/all").status_code == 401
        response = client.get("/teams/all")
        assert response.status_code == 429
        assert response.json()["message"] == "Too many requests, please try again later"

    def test_allowed_responses_carry_headers(self, limited_client):
        client = limited_client(api_rate_limit=5)
        response = client.get("/teams/all")
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "4"

    def test_health_is_exempt(self, limited_client):
        client = limited_client(api_rate_limit=1)
        for _ in range(3):
            assert client.get("/health").status_code == 200

    def test_each_app_has_its_own_counters(self, limited_client):
        first = limited_client(api_rate_limit=1)
        second = limited_client(api_rate_limit=1)
        assert first.get("/teams/all").status_code == 401
        assert second.get("/teams/all").status_code == 401
        assert first.get("/teams/all").status_code == 429


class TestMemoryStore:
    def _middleware(self, rule):
        return RateLimitMiddleware(app=None, rules=[rule])

    def test_expired_clients_are_forgotten(self, monkeypatch):
        rule = RateLimitRule(name="api", limit=5, window_seconds=60, path_prefix="/")
        limiter = self._middleware(rule)
        clock = iter([1000.0, 1001.0, 1100.0])
        monkeypatch.setattr("projecthub.middleware.rate_limit.time.time", lambda: next(clock))

        limiter._check_rate_memory(rule, "api:10.0.0.1")
        limiter._check_rate_memory(rule, "api:10.0.0.2")
        assert set(limiter._memory_store) == {"api:10.0.0.1", "api:10.0.0.2"}

        allowed, remaining, _ = limiter._check_rate_memory(rule, "api:10.0.0.3")
        assert allowed
        assert remaining == 4
        assert list(limiter._memory_store) == ["api:10.0.0.3"]

    def test_hits_inside_the_window_still_count(self, monkeypatch):
        rule = RateLimitRule(name="api", limit=2, window_seconds=60, path_prefix="/")
        limiter = self._middleware(rule)
        clock = iter([1000.0, 1010.0, 1020.0, 1061.0])
        monkeypatch.setattr("projecthub.middleware.rate_limit.time.time", lambda: next(clock))

        assert limiter._check_rate_memory(rule, "api:10.0.0.1")[0]
        assert limiter._check_rate_memory(rule, "api:10.0.0.1")[0]
        assert limiter._check_rate_memory(rule, "api:10.0.0.1") == (False, 0, 41)
        assert limiter._check_rate_memory(rule, "api:10.0.0.1")[0]
