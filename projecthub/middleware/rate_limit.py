"""Sliding-window rate limiting.

Counters live in Redis when ``RATE_LIMIT_REDIS_URL`` is configured and
reachable, otherwise in a per-middleware in-memory store.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from threading import Lock
from typing import TYPE_CHECKING, ClassVar

import redis
from starlette.requests import Request
from starlette.responses import JSONResponse

from projecthub.errors import RateLimitError, error_body
from projecthub.logging import get_logger

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

    from projecthub.config import Settings

logger = get_logger(__name__)

RATE_LIMIT_PREFIX = "api_rate:"


@dataclass(frozen=True)
class RateLimitRule:
    name: str
    limit: int
    window_seconds: int
    path_prefix: str
    methods: frozenset[str] | None = None
    exclude_prefixes: tuple[str, ...] = ()
    message: str = RateLimitError.default_message

    def matches(self, method: str, path: str) -> bool:
        if not path.startswith(self.path_prefix):
            return False
        if any(path.startswith(prefix) for prefix in self.exclude_prefixes):
            return False
        return self.methods is None or method in self.methods


def default_rules(settings: Settings) -> list[RateLimitRule]:
    return [
        RateLimitRule(
            name="api",
            limit=settings.api_rate_limit,
            window_seconds=settings.api_rate_window,
            path_prefix="/",
            exclude_prefixes=("/auth",),
        ),
        RateLimitRule(
            name="login",
            limit=settings.login_rate_limit,
            window_seconds=settings.login_rate_window,
            path_prefix="/auth/login",
            methods=frozenset({"POST"}),
            message="Too many login attempts, please try again in 15 minutes",
        ),
        RateLimitRule(
            name="register",
            limit=settings.register_rate_limit,
            window_seconds=settings.register_rate_window,
            path_prefix="/auth/register",
            methods=frozenset({"POST"}),
            message="Too many registration attempts, please try again in 1 hour",
        ),
    ]


def client_address(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware:
    """
    Rate limiting middleware.

    Each rule that matches a request counts it under ``<rule>:<client ip>``.
    The first rule that is exhausted rejects the request with 429 and the
    usual error envelope. Allowed responses carry:
    - X-RateLimit-Limit: Maximum requests per window
    - X-RateLimit-Remaining: Requests remaining in current window
    - X-RateLimit-Reset: Seconds until window resets
    """

    EXEMPT_PATHS: ClassVar[set[str]] = {"/health", "/metrics", "/favicon.ico"}
    EXEMPT_PREFIXES: ClassVar[tuple[str, ...]] = ("/docs", "/openapi", "/redoc")

    def __init__(
        self,
        app: ASGIApp,
        rules: list[RateLimitRule],
        redis_url: str | None = None,
        key_func: Callable[[Request], str] | None = None,
    ):
        self.app = app
        self.rules = rules
        self.redis_url = redis_url
        self.key_func = key_func or client_address
        self._redis = None
        self._redis_available = None if redis_url else False
        self._memory_store: dict[str, list[float]] = {}
        self._memory_lock = Lock()

    def _get_redis(self):
        """Get Redis client lazily."""
        if self._redis_available is False:
            return None

        if self._redis is None:
            try:
                self._redis = redis.from_url(self.redis_url, decode_responses=True)
                self._redis.ping()
                self._redis_available = True
                logger.info("rate_limiter_redis_connected")
            except redis.RedisError as e:
                logger.warning("rate_limiter_redis_unavailable error=%s", e)
                self._redis_available = False
                self._redis = None

        return self._redis

    def _should_skip(self, path: str) -> bool:
        if path in self.EXEMPT_PATHS:
            return True
        return any(path.startswith(prefix) for prefix in self.EXEMPT_PREFIXES)

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        path = request.url.path
        if self._should_skip(path):
            await self.app(scope, receive, send)
            return

        client = self.key_func(request)
        headers_rule: RateLimitRule | None = None
        remaining = reset_in = 0
        for rule in self.rules:
            if not rule.matches(request.method, path):
                continue
            allowed, rule_remaining, rule_reset = self._check_rate(rule, f"{rule.name}:{client}")
            if not allowed:
                logger.info("rate_limited rule=%s client=%s path=%s", rule.name, client, path)
                response = JSONResponse(
                    status_code=429,
                    content=error_body(rule.message),
                    headers={
                        "X-RateLimit-Limit": str(rule.limit),
                        "X-RateLimit-Remaining": "0",
                        "X-RateLimit-Reset": str(rule_reset),
                        "Retry-After": str(rule_reset),
                    },
                )
                await response(scope, receive, send)
                return
            if headers_rule is None or rule_remaining < remaining:
                headers_rule, remaining, reset_in = rule, rule_remaining, rule_reset

        if headers_rule is None:
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.extend(
                    [
                        (b"X-RateLimit-Limit", str(headers_rule.limit).encode()),
                        (b"X-RateLimit-Remaining", str(remaining).encode()),
                        (b"X-RateLimit-Reset", str(reset_in).encode()),
                    ]
                )
                message = {**message, "headers": headers}
            await send(message)

        await self.app(scope, receive, send_with_headers)

    def _check_rate(self, rule: RateLimitRule, key: str) -> tuple[bool, int, int]:
        """
        Check ``rule`` for ``key`` using a sliding window.

        Returns:
            Tuple of (allowed, remaining, reset_in_seconds)
        """
        client = self._get_redis()
        if client:
            return self._check_rate_redis(client, rule, key)
        return self._check_rate_memory(rule, key)

    def _check_rate_redis(self, client, rule: RateLimitRule, key: str) -> tuple[bool, int, int]:
        """Check rate limit using Redis sorted set for sliding window."""
        full_key = f"{RATE_LIMIT_PREFIX}{key}"
        now = time.time()
        window_start = now - rule.window_seconds

        try:
            pipe = client.pipeline()
            pipe.zremrangebyscore(full_key, 0, window_start)
            pipe.zcard(full_key)
            pipe.zadd(full_key, {str(now): now})
            pipe.expire(full_key, rule.window_seconds + 1)
            results = pipe.execute()

            current_count = results[1]

            if current_count >= rule.limit:
                client.zrem(full_key, str(now))
                oldest = client.zrange(full_key, 0, 0, withscores=True)
                if oldest:
                    reset_in = int(oldest[0][1] + rule.window_seconds - now) + 1
                else:
                    reset_in = rule.window_seconds
                return False, 0, reset_in

            return True, max(0, rule.limit - current_count - 1), rule.window_seconds

        except redis.RedisError as e:
            logger.warning("rate_limit_redis_error key=%s error=%s", key, e)
            return True, rule.limit - 1, rule.window_seconds

    def _prune_memory(self, now: float, window_seconds: int) -> None:
        """Drop hits older than the longest window and forget emptied keys."""
        horizon = now - max([window_seconds, *(rule.window_seconds for rule in self.rules)])
        for key in list(self._memory_store):
            hits = [t for t in self._memory_store[key] if t > horizon]
            if hits:
                self._memory_store[key] = hits
            else:
                del self._memory_store[key]

    def _check_rate_memory(self, rule: RateLimitRule, key: str) -> tuple[bool, int, int]:
        now = time.time()
        window_start = now - rule.window_seconds

        with self._memory_lock:
            self._prune_memory(now, rule.window_seconds)
            hits = [t for t in self._memory_store.get(key, ()) if t > window_start]

            if len(hits) >= rule.limit:
                reset_in = int(hits[0] + rule.window_seconds - now) + 1 if hits else rule.window_seconds
                return False, 0, reset_in

            hits.append(now)
            self._memory_store[key] = hits
            return True, max(0, rule.limit - len(hits)), rule.window_seconds
