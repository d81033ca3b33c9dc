"""Tests for auth/config.py."""
import pytest
from flask import Flask

from auth.config import get_settings, init_auth, load_auth_settings

ENV_NAMES = [
    "OAUTH_CLIENT_ID",
    "API_URL",
    "APP_URL",
    "OAUTH_TOKEN_URL",
    "OAUTH_REDIRECT_URI",
    "OAUTH_AUTHORIZE_URL",
    "OAUTH_HTTP_TIMEOUT",
    "COOKIE_SECURE",
    "PROTECTED_PATH_PREFIXES",
    "APP_ENV",
]


@pytest.fixture
def env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv("NEXT_PUBLIC_" + name, raising=False)
    monkeypatch.setenv("OAUTH_CLIENT_ID", "client-123")
    monkeypatch.setenv("API_URL", "https://api.example.com/")
    monkeypatch.setenv("APP_URL", "https://app.example.com")
    return monkeypatch


class TestLoadAuthSettings:
    def test_defaults(self, env):
        s = load_auth_settings()
        assert s.client_id == "client-123"
        assert s.api_url == "https://api.example.com"
        assert s.token_url == "https://api.example.com/oauth/token"
        assert s.refresh_url == "https://api.example.com/oauth/token"
        assert s.user_url == "https://api.example.com/api/user/show"
        assert s.redirect_uri == "https://app.example.com/auth/callback"
        assert s.authorize_url == "https://api.example.com/start-pkce"
        assert s.dashboard_url == "https://app.example.com/dashboard"
        assert s.http_timeout == 10.0
        assert s.cookie_secure is False
        assert s.protected_prefixes == ("/dashboard",)
        assert not s.is_production

    def test_missing_required(self, env):
        env.delenv("OAUTH_CLIENT_ID")
        env.delenv("APP_URL")
        with pytest.raises(RuntimeError, match="OAUTH_CLIENT_ID, APP_URL"):
            load_auth_settings()

    def test_next_public_names_accepted(self, env):
        env.delenv("OAUTH_CLIENT_ID")
        env.setenv("NEXT_PUBLIC_OAUTH_CLIENT_ID", "legacy-client")
        env.setenv("NEXT_PUBLIC_OAUTH_TOKEN_URL", "https://id.example.com/oauth/token")
        s = load_auth_settings()
        assert s.client_id == "legacy-client"
        assert s.token_url == "https://id.example.com/oauth/token"

    def test_plain_name_wins_over_legacy(self, env):
        env.setenv("NEXT_PUBLIC_OAUTH_CLIENT_ID", "legacy-client")
        assert load_auth_settings().client_id == "client-123"

    def test_production_defaults_to_secure_cookies(self, env):
        env.setenv("APP_ENV", "production")
        s = load_auth_settings()
        assert s.is_production
        assert s.cookie_secure is True

    def test_cookie_secure_override(self, env):
        env.setenv("APP_ENV", "production")
        env.setenv("COOKIE_SECURE", "false")
        assert load_auth_settings().cookie_secure is False

    @pytest.mark.parametrize("raw", ["abc", "0", "-3"])
    def test_bad_timeout(self, env, raw):
        env.setenv("OAUTH_HTTP_TIMEOUT", raw)
        with pytest.raises(RuntimeError, match="OAUTH_HTTP_TIMEOUT"):
            load_auth_settings()

    def test_protected_prefixes_parsed(self, env):
        env.setenv("PROTECTED_PATH_PREFIXES", "dashboard/, /admin  /reports")
        assert load_auth_settings().protected_prefixes == ("/dashboard", "/admin", "/reports")


class TestInitAuth:
    def test_attaches_settings(self, env):
        app = Flask(__name__)
        settings = init_auth(app)
        assert get_settings(app) is settings

    def test_get_settings_uninitialized(self):
        with pytest.raises(RuntimeError, match="not initialized"):
            get_settings(Flask(__name__))
