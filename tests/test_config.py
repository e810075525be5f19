"""Tests for configuration validation.

Settings are constructed directly so invalid values are rejected without
reloading the module-level instance the app was built with.
"""

import pytest
from pydantic import ValidationError

from alumnae.core.config import Settings

VALID_SECRET = "s" * 32


class TestJwtSecretValidation:
    def test_valid_secret_accepted(self):
        settings = Settings(jwt_secret_key=VALID_SECRET)
        assert settings.jwt_secret_key == VALID_SECRET

    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(jwt_secret_key="too-short")
        assert "32" in str(exc_info.value)


class TestDefaults:
    def test_auth_defaults(self, monkeypatch):
        for name in [
            "JWT_EXPIRE_DAYS",
            "LOCKOUT_MAX_ATTEMPTS",
            "LOCKOUT_MINUTES",
            "PASSWORD_MIN_LENGTH",
        ]:
            monkeypatch.delenv(name, raising=False)

        settings = Settings(jwt_secret_key=VALID_SECRET, _env_file=None)
        assert settings.jwt_expire_days == 30
        assert settings.jwt_issuer == "ssa-alumnae-app"
        assert settings.jwt_audience == "ssa-alumnae-users"
        assert settings.lockout_max_attempts == 5
        assert settings.lockout_minutes == 30
        assert settings.password_min_length == 6


class TestLogLevelValidation:
    def test_log_level_normalized(self):
        assert Settings(jwt_secret_key=VALID_SECRET, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(jwt_secret_key=VALID_SECRET, log_level="LOUD")


class TestLockoutValidation:
    @pytest.mark.parametrize("field", ["lockout_max_attempts", "lockout_minutes"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(jwt_secret_key=VALID_SECRET, **{field: 0})


class TestCorsOrigins:
    def test_cors_origins_list_split(self):
        settings = Settings(
            jwt_secret_key=VALID_SECRET,
            cors_origins="http://a.test, http://b.test,,",
        )
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]
