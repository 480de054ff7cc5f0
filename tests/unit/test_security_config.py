"""
Unit tests for CORS and trusted-host settings
"""

import pytest

from api.security_config import (
    LOCAL_HOSTS,
    PRODUCTION_HOSTS,
    PRODUCTION_ORIGINS,
    get_allowed_hosts,
    get_allowed_origins,
)


@pytest.mark.unit
class TestAllowedHosts:
    def test_local_hosts_outside_production(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "development")
        monkeypatch.setenv("TRUSTED_HOSTS", "estimates.example.com")
        assert get_allowed_hosts() == LOCAL_HOSTS

    def test_production_defaults(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.delenv("TRUSTED_HOSTS", raising=False)
        monkeypatch.delenv("CORS_ORIGINS", raising=False)
        assert get_allowed_hosts() == PRODUCTION_HOSTS
        assert get_allowed_origins() == PRODUCTION_ORIGINS

    def test_production_overrides(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("TRUSTED_HOSTS", "estimates.example.com, ,api.example.com")
        monkeypatch.setenv("CORS_ORIGINS", "https://estimates.example.com")
        assert get_allowed_hosts() == ["estimates.example.com", "api.example.com"]
        assert get_allowed_origins() == ["https://estimates.example.com"]
