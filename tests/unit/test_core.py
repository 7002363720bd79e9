"""
Unit tests for core helpers: clock utilities, settings validation, password
hashing and partial-update schemas.
"""
from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from regintel.auth.security import hash_password, verify_password
from regintel.core.config import Settings
from regintel.core.database import to_async_url
from regintel.core.utils import apply_changes, day_bounds, days_since, days_until, round_half_up, to_naive_utc
from regintel.web.routers.companies import CompanyUpdate

NOW = datetime(2026, 3, 2, 12, 0, 0)


class TestDateHelpers:

    def test_days_since_floors(self):
        assert days_since(NOW - timedelta(days=2, hours=23), now=NOW) == 2
        assert days_since(None, now=NOW) is None

    def test_days_until_rounds_up(self):
        assert days_until(NOW + timedelta(days=2, hours=1), now=NOW) == 3
        assert days_until(NOW + timedelta(days=3), now=NOW) == 3
        assert days_until(None, now=NOW) is None

    def test_aware_datetimes_are_normalized(self):
        aware = datetime(2026, 3, 2, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == NOW
        assert days_since(aware, now=NOW) == 0

    def test_day_bounds(self):
        start, end = day_bounds(date(2026, 3, 2))
        assert start == datetime(2026, 3, 2)
        assert end.date() == date(2026, 3, 2)
        assert end > datetime(2026, 3, 2, 23, 59, 59)

    def test_round_half_up(self):
        assert round_half_up(32.5) == 33
        assert round_half_up(82.5) == 83
        assert round_half_up(82.4) == 82

    def test_apply_changes_normalizes_datetimes(self):
        target = SimpleNamespace(name=None, when=None)
        apply_changes(target, {
            "name": "Acme",
            "when": datetime(2026, 3, 2, 13, 0, tzinfo=timezone(timedelta(hours=1))),
        })
        assert target.name == "Acme"
        assert target.when == NOW


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.pressure_alert_threshold == 70
        assert settings.vulnerability_risk_factor_cap is None
        assert settings.briefing_hour == 7

    def test_rejects_unsupported_database(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, database_url="mysql://root@localhost/regintel")

    def test_rejects_invalid_hour(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, briefing_hour=24)

    def test_production_requires_admin_password(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="production")
        Settings(_env_file=None, environment="production", admin_password="s3cret-enough")

    def test_async_driver_urls(self):
        assert to_async_url("postgresql://u:p@db/regintel") == "postgresql+asyncpg://u:p@db/regintel"
        assert to_async_url("sqlite:///./regintel.db") == "sqlite+aiosqlite:///./regintel.db"
        assert to_async_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"


class TestPasswordHashing:

    def test_round_trip(self):
        stored = hash_password("correct horse")
        assert stored.startswith("$2b$")
        assert verify_password("correct horse", stored)
        assert not verify_password("wrong horse", stored)

    def test_salts_differ(self):
        assert hash_password("same") != hash_password("same")

    def test_malformed_hash_is_rejected(self):
        assert not verify_password("anything", "not-a-hash")
        assert not verify_password("anything", "md5$1$salt$abc")


class TestUpdateSchemas:

    def test_omitted_fields_are_not_dumped(self):
        assert CompanyUpdate(website="https://acme.example").model_dump(exclude_unset=True) == {
            "website": "https://acme.example",
        }

    def test_explicit_null_on_required_column_is_rejected(self):
        with pytest.raises(ValidationError):
            CompanyUpdate.model_validate({"name": None})
        with pytest.raises(ValidationError):
            CompanyUpdate.model_validate({"gtm_gap_detected": None})

    def test_explicit_null_on_nullable_column_is_kept(self):
        update = CompanyUpdate.model_validate({"analysis_notes": None})
        assert update.model_dump(exclude_unset=True) == {"analysis_notes": None}
