"""
Tests for Settings validation.
"""

import pytest
from pydantic import ValidationError

from ehrcloud.core.config import Settings

from conftest import make_settings


class TestSettings:

    def test_normalisation(self):
        settings = make_settings(ENVIRONMENT="TEST", LOG_LEVEL="debug", BASE_DOMAIN=" EHR.Example.com. ")
        assert settings.ENVIRONMENT == "test"
        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.BASE_DOMAIN == "ehr.example.com"

    def test_unknown_environment(self):
        with pytest.raises(ValidationError):
            make_settings(ENVIRONMENT="qa")

    def test_cors_origins_from_string(self):
        assert make_settings(CORS_ORIGINS='["https://a.example.com"]').CORS_ORIGINS == ["https://a.example.com"]
        assert make_settings(CORS_ORIGINS="https://b.example.com").CORS_ORIGINS == ["https://b.example.com"]

    def test_production_requires_real_secrets(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT="production", DATABASE_URL="sqlite://")

    def test_production_secrets_must_differ(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT="production", JWT_SECRET="same", JWT_REFRESH_SECRET="same")

    def test_rate_limit_window(self):
        assert make_settings(RATE_LIMIT_WINDOW_MS=1500).rate_limit_window_seconds == 1.5
        with pytest.raises(ValidationError):
            make_settings(RATE_LIMIT_MAX_REQUESTS=0)
