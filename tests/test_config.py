"""Tests for environment configuration."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from diylifestyle.config import Settings


def test_defaults(monkeypatch):
    for name in ("DATABASE_PATH", "MONGO_URI", "PORT", "SESSION_SECRET", "APP_BASE_URL", "OAUTH_STATE_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    s = Settings(_env_file=None)
    assert s.port == 3000
    assert s.session_max_age_seconds == 86400
    assert s.login_success_path == "/diylifestyle/index"
    assert s.login_failure_path == "/diylifestyle/login"
    assert s.cookie_secure is False
    assert s.oauth_state_ttl_seconds == 600


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "client-id")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("SESSION_SECRET", "s3cret")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("APP_BASE_URL", "https://diy.example.com")
    s = Settings(_env_file=None)
    assert s.google_client_id == "client-id"
    assert s.google_client_secret == "client-secret"
    assert s.session_secret == "s3cret"
    assert s.port == 8080
    assert s.cookie_secure is True
    assert s.google_callback_url == "https://diy.example.com/auth/google/callback"


def test_mongo_uri_sets_database_location(monkeypatch):
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    monkeypatch.setenv("MONGO_URI", "/var/lib/diy/blog.db")
    assert Settings(_env_file=None).database_path == "/var/lib/diy/blog.db"


@pytest.mark.parametrize("uri", ["mongodb://localhost:27017/diylifestyle", "mongodb+srv://user@cluster0.example.net/db"])
def test_mongodb_connection_string_is_rejected(monkeypatch, uri):
    monkeypatch.delenv("DATABASE_PATH", raising=False)
    monkeypatch.setenv("MONGO_URI", uri)
    with pytest.raises(ValidationError, match="SQLite file path"):
        Settings(_env_file=None)


def test_state_lifetime_from_environment(monkeypatch):
    monkeypatch.setenv("OAUTH_STATE_TTL_SECONDS", "120")
    assert Settings(_env_file=None).oauth_state_ttl_seconds == 120
