"""
Tests for JWT helpers and the in-memory rate limiter
"""
from unittest.mock import patch

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from app.core.auth import TokenUser, create_access_token, decode_token
from app.core.rate_limit import RateLimiter, RateLimitMiddleware, SENSITIVE_PATHS, rate_limiter


class TestTokens:

    def test_token_round_trip_keeps_role(self):
        token = create_access_token(TokenUser(id="7", email="gerente@loja.test", role="admin"))

        payload = decode_token(token)

        assert payload["sub"] == "7"
        assert payload["role"] == "admin"
        assert payload["exp"] > payload["iat"]

    def test_expired_token_is_rejected(self):
        token = create_access_token(TokenUser(id="7", email="gerente@loja.test"), expires_minutes=-5)

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_tampered_token_is_rejected(self):
        token = create_access_token(TokenUser(id="7", email="gerente@loja.test"))

        with pytest.raises(HTTPException) as exc_info:
            decode_token(token[:-4] + "abcd")

        assert exc_info.value.status_code == 401


class TestRateLimiter:

    def test_blocks_after_limit(self):
        limiter = RateLimiter()

        results = [limiter.is_allowed("ip:1.2.3.4", max_requests=3)[0] for _ in range(4)]

        assert results == [True, True, True, False]

    def test_remaining_counts_down(self):
        limiter = RateLimiter()

        assert limiter.is_allowed("ip:1.2.3.4", max_requests=2) == (True, 1, 0)
        assert limiter.is_allowed("ip:1.2.3.4", max_requests=2) == (True, 0, 0)

        allowed, remaining, retry_after = limiter.is_allowed("ip:1.2.3.4", max_requests=2)
        assert not allowed
        assert remaining == 0
        assert 1 <= retry_after <= 61

    def test_identifiers_are_independent(self):
        limiter = RateLimiter()
        limiter.is_allowed("ip:a", max_requests=1)

        assert limiter.is_allowed("ip:b", max_requests=1)[0] is True
        assert limiter.is_allowed("ip:a", max_requests=1)[0] is False

    def test_reset_clears_counters(self):
        limiter = RateLimiter()
        limiter.is_allowed("ip:a", max_requests=1)

        limiter.reset()

        assert limiter.is_allowed("ip:a", max_requests=1)[0] is True

    @patch('app.core.rate_limit.settings')
    def test_middleware_limits_login_per_ip(self, mock_settings):
        mock_settings.RATE_LIMIT_ENABLED = True
        rate_limiter.reset()

        app = FastAPI()
        app.add_middleware(RateLimitMiddleware)

        @app.post("/api/v1/auth/login")
        async def login():
            return {"ok": True}

        client = TestClient(app)
        limit = SENSITIVE_PATHS["/api/v1/auth/login"]
        codes = [client.post("/api/v1/auth/login").status_code for _ in range(limit + 1)]
        rate_limiter.reset()

        assert codes[:limit] == [200] * limit
        assert codes[-1] == 429
