"""Tests for environment-driven settings parsing."""

import pytest

from models.config import Settings


class TestCorsOrigins:
    def test_comma_separated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ORIGINS", "http://a.com, http://b.com")

        assert Settings().CORS_ORIGINS == ["http://a.com", "http://b.com"]

    def test_json_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ORIGINS", '["http://a.com", "http://b.com"]')

        assert Settings().CORS_ORIGINS == ["http://a.com", "http://b.com"]

    def test_single_origin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000")

        assert Settings().CORS_ORIGINS == ["http://localhost:3000"]


class TestRateLimitStrings:
    def test_limits_follow_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SIGNUP_RATE_LIMIT_ATTEMPTS", "10")

        config = Settings()

        assert config.signup_rate_limit == "10/60 minutes"
        assert config.login_rate_limit == "5/15 minutes"
