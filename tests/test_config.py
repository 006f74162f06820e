"""Tests for environment-driven settings"""

import pytest
from pydantic import ValidationError

from mempool_api.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MEMPOOL_BASE_URL", raising=False)
        monkeypatch.delenv("MEMPOOL_MAX_RETRIES", raising=False)
        settings = Settings(_env_file=None)
        assert settings.base_url == "https://mempool.space/api"
        assert settings.max_retries == 10
        assert settings.base_backoff_ms == 256

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MEMPOOL_BASE_URL", "https://blockstream.info/testnet/api")
        monkeypatch.setenv("MEMPOOL_MAX_RETRIES", "3")

        settings = Settings(_env_file=None)

        assert settings.base_url == "https://blockstream.info/testnet/api"
        assert settings.max_retries == 3

    @pytest.mark.parametrize("field", ["max_retries", "base_backoff_ms", "gap_limit"])
    def test_negative_rejected(self, field):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: -1})

    def test_batch_size_at_least_one(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, scan_batch_size=0)
