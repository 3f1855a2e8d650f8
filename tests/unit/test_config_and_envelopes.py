"""
Name: Settings, Pagination and Error Envelope Tests

Responsibilities:
  - JWT lifetime expressions and secret validation
  - Production hardening rules
  - PageRequest bounds and the paginated envelope arithmetic
  - Request metrics collapse numeric path segments
"""

import pytest
from pydantic import ValidationError

from daily_report.crosscutting.config import (
    DEFAULT_TOKEN_TTL_SECONDS,
    Settings,
    parse_expires_in,
)
from daily_report.crosscutting.error_responses import (
    ERROR_STATUS,
    ErrorCode,
    error_for,
    paginated_response,
    success_response,
)
from daily_report.crosscutting.metrics import _normalize_endpoint
from daily_report.crosscutting.pagination import MAX_PER_PAGE, PageRequest

pytestmark = pytest.mark.unit

STRONG_SECRET = "a-very-long-production-secret-value-0123456789"


class TestSettings:
    @pytest.mark.parametrize(
        "value,seconds",
        [
            ("45s", 45),
            ("30m", 1800),
            ("24h", 86400),
            ("7d", 604800),
            (" 2h ", 7200),
            ("", DEFAULT_TOKEN_TTL_SECONDS),
            (None, DEFAULT_TOKEN_TTL_SECONDS),
            ("ten minutes", DEFAULT_TOKEN_TTL_SECONDS),
            ("10w", DEFAULT_TOKEN_TTL_SECONDS),
        ],
    )
    def test_parse_expires_in(self, value, seconds):
        assert parse_expires_in(value) == seconds

    def test_empty_secret_is_rejected(self):
        with pytest.raises(ValidationError):
            Settings(jwt_secret="   ", app_env="test")

    def test_production_requires_long_secret_and_secure_cookie(self):
        with pytest.raises(ValidationError):
            Settings(jwt_secret="short", app_env="production", jwt_cookie_secure=True)
        with pytest.raises(ValidationError):
            Settings(jwt_secret=STRONG_SECRET, app_env="production")

        settings = Settings(
            jwt_secret=STRONG_SECRET, app_env="production", jwt_cookie_secure=True
        )
        assert settings.is_production() is True

    def test_allowed_origins_are_split(self):
        settings = Settings(
            jwt_secret=STRONG_SECRET,
            app_env="test",
            allowed_origins="http://a.test, http://b.test,,",
        )

        assert settings.get_allowed_origins_list() == ["http://a.test", "http://b.test"]


class TestPagination:
    def test_offset_and_limit(self):
        page = PageRequest(page=3, per_page=20)

        assert page.limit == 20
        assert page.offset == 40

    @pytest.mark.parametrize(
        "page,per_page", [(0, 20), (1, 0), (1, MAX_PER_PAGE + 1)]
    )
    def test_bounds(self, page, per_page):
        with pytest.raises(ValueError):
            PageRequest(page=page, per_page=per_page)

    def test_paginated_envelope(self):
        body = paginated_response([1, 2], page=2, per_page=2, total_count=5)

        assert body == {
            "success": True,
            "data": [1, 2],
            "pagination": {
                "current_page": 2,
                "per_page": 2,
                "total_pages": 3,
                "total_count": 5,
            },
        }

    def test_empty_listing_has_zero_pages(self):
        body = paginated_response([], page=1, per_page=20, total_count=0)

        assert body["pagination"]["total_pages"] == 0


class TestErrorEnvelope:
    def test_success_envelope(self):
        assert success_response({"id": 1}) == {"success": True, "data": {"id": 1}}

    @pytest.mark.parametrize(
        "code,status",
        [
            (ErrorCode.UNAUTHORIZED, 401),
            (ErrorCode.ACCOUNT_DISABLED, 401),
            (ErrorCode.FORBIDDEN, 403),
            (ErrorCode.NOT_FOUND, 404),
            (ErrorCode.CONFLICT, 409),
            (ErrorCode.DUPLICATE_EMAIL, 409),
            (ErrorCode.VALIDATION_ERROR, 422),
            (ErrorCode.DATABASE_ERROR, 503),
        ],
    )
    def test_status_follows_code(self, code, status):
        exc = error_for(code, "boom")

        assert exc.status_code == status
        assert exc.code is code
        assert exc.detail == "boom"

    def test_every_code_has_a_status(self):
        assert set(ERROR_STATUS) == set(ErrorCode)


class TestMetrics:
    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/api/v1/reports/42", "/api/v1/reports/{id}"),
            ("/api/v1/reports/42/comments", "/api/v1/reports/{id}/comments"),
            ("/api/v1/reports", "/api/v1/reports"),
            ("", "/"),
        ],
    )
    def test_numeric_segments_are_collapsed(self, path, expected):
        assert _normalize_endpoint(path) == expected
