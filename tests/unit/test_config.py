from datetime import timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from coinbasis.config import Settings


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.transfer_time_window == timedelta(hours=1)
        assert s.transfer_amount_tolerance == Decimal("0.0001")
        assert s.database_url.startswith("postgresql+asyncpg://")

    def test_window_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(transfer_time_window_seconds=0)
        with pytest.raises(ValidationError):
            Settings(transfer_time_window_seconds=-60)

    def test_tolerance_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            Settings(transfer_amount_tolerance=Decimal("-0.01"))

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("COINBASIS_TRANSFER_TIME_WINDOW_SECONDS", "600")
        assert Settings().transfer_time_window == timedelta(minutes=10)
