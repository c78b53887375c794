from datetime import date, datetime, timedelta, timezone

import pytest
from jose import JWTError
from pydantic import ValidationError

from partnerhub.core.config import Environment, Settings
from partnerhub.core.permissions import Caller, UserRole, is_privileged
from partnerhub.core.security import create_access_token, decode_access_token
from partnerhub.utils.timezone import end_of_day, to_local_naive


class TestSettings:
    def test_database_uri_is_derived_and_escaped(self):
        config = Settings(
            POSTGRES_USER="hub",
            POSTGRES_PASSWORD="p@ss word",
            POSTGRES_SERVER="db",
            POSTGRES_PORT=5433,
            POSTGRES_DB="partners",
        )
        assert config.SQLALCHEMY_DATABASE_URI == "postgresql+psycopg2://hub:p%40ss+word@db:5433/partners"

    def test_explicit_database_uri_is_kept(self):
        config = Settings(SQLALCHEMY_DATABASE_URI="sqlite://")
        assert config.SQLALCHEMY_DATABASE_URI == "sqlite://"

    def test_search_default_cannot_exceed_max(self):
        with pytest.raises(ValidationError):
            Settings(SEARCH_DEFAULT_LIMIT=50, SEARCH_MAX_LIMIT=20)

    def test_production_requires_secret_key(self):
        with pytest.raises(ValidationError):
            Settings(ENVIRONMENT=Environment.PRODUCTION, SECRET_KEY="change-me")

    def test_log_level_is_normalized(self):
        assert Settings(LOG_LEVEL=" debug ").LOG_LEVEL == "DEBUG"
        assert Settings(LOG_LEVEL="").LOG_LEVEL == "INFO"


class TestPermissions:
    @pytest.mark.parametrize("role", ["admin", "manager", "Manager", UserRole.ADMIN])
    def test_privileged(self, role):
        assert is_privileged(role)

    @pytest.mark.parametrize("role", ["member", "partner", "superuser", "", None])
    def test_not_privileged(self, role):
        assert not is_privileged(role)

    def test_caller_property(self):
        assert Caller(user_id="u1", role="admin").is_privileged
        assert not Caller(user_id="u1", role="member").is_privileged


class TestTokens:
    def test_round_trip_claims(self):
        token = create_access_token("user-1", "manager", organization_id="org-9")
        payload = decode_access_token(token)
        assert payload["sub"] == "user-1"
        assert payload["role"] == "manager"
        assert payload["org"] == "org-9"

    def test_expired_token_is_rejected(self):
        token = create_access_token("user-1", "member", expires_delta=timedelta(seconds=-10))
        with pytest.raises(JWTError):
            decode_access_token(token)


class TestTimezone:
    def test_end_of_day(self):
        assert end_of_day(date(2024, 6, 10)) == datetime(2024, 6, 10, 23, 59, 59, 999999)

    def test_to_local_naive(self):
        assert to_local_naive(None) is None
        assert to_local_naive(date(2024, 6, 10)) == datetime(2024, 6, 10)
        naive = datetime(2024, 6, 10, 8, 30)
        assert to_local_naive(naive) is naive
        # Test settings run in UTC
        aware = datetime(2024, 6, 10, 8, 30, tzinfo=timezone(timedelta(hours=9)))
        assert to_local_naive(aware) == datetime(2024, 6, 9, 23, 30)
