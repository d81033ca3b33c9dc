"""
Authentication configuration.

All settings are sourced from environment variables. Each variable is looked up
by its plain name first and then with the `NEXT_PUBLIC_` prefix, so an `.env`
file written for the previous front-end keeps working. This module validates
presence of required settings and exposes a single `init_auth(app)` entrypoint.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from flask import Flask, current_app

LEGACY_PREFIX = "NEXT_PUBLIC_"
DEFAULT_HTTP_TIMEOUT = 10.0


def _env(name: str, default: str | None = None) -> str | None:
    for key in (name, LEGACY_PREFIX + name):
        val = os.environ.get(key)
        if val is not None and val.strip():
            return val.strip()
    return default


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _normalize_prefix(prefix: str) -> str:
    return "/" + prefix.strip("/")


@dataclass(frozen=True)
class AuthSettings:
    """Configuration needed for the Passport PKCE flow."""

    client_id: str
    api_url: str
    app_url: str
    token_url: str
    redirect_uri: str
    authorize_url: str
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    cookie_secure: bool = False
    protected_prefixes: tuple[str, ...] = ("/dashboard",)
    environment: str = "development"

    @property
    def refresh_url(self) -> str:
        return f"{self.api_url}/oauth/token"

    @property
    def user_url(self) -> str:
        return f"{self.api_url}/api/user/show"

    @property
    def dashboard_url(self) -> str:
        return f"{self.app_url}/dashboard"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_auth_settings() -> AuthSettings:
    """
    Load auth settings from environment variables.

    Required:
      - OAUTH_CLIENT_ID
      - API_URL   (Passport server base URL, e.g. https://api.example.com)
      - APP_URL   (public base URL of this app)

    Optional:
      - OAUTH_TOKEN_URL (default: {API_URL}/oauth/token)
      - OAUTH_REDIRECT_URI (default: {APP_URL}/auth/callback)
      - OAUTH_AUTHORIZE_URL (default: {API_URL}/start-pkce)
      - OAUTH_HTTP_TIMEOUT (default: 10 seconds)
      - COOKIE_SECURE (default: true in production, false otherwise)
      - PROTECTED_PATH_PREFIXES (default: /dashboard)
      - APP_ENV (default: development)
    """

    client_id = _env("OAUTH_CLIENT_ID", "")
    api_url = (_env("API_URL", "") or "").rstrip("/")
    app_url = (_env("APP_URL", "") or "").rstrip("/")

    missing = [k for k, v in [("OAUTH_CLIENT_ID", client_id), ("API_URL", api_url), ("APP_URL", app_url)] if not v]
    if missing:
        raise RuntimeError(
            "Missing required auth environment variables: "
            + ", ".join(missing)
            + ". Set them in your environment (or .env file) before starting the app."
        )

    environment = (_env("APP_ENV", "development") or "development").lower()

    timeout_raw = _env("OAUTH_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))
    try:
        http_timeout = float(timeout_raw)
    except ValueError:
        raise RuntimeError(f"OAUTH_HTTP_TIMEOUT must be a number of seconds, got {timeout_raw!r}.") from None
    if http_timeout <= 0:
        raise RuntimeError("OAUTH_HTTP_TIMEOUT must be greater than zero.")

    secure_raw = _env("COOKIE_SECURE")
    cookie_secure = _parse_bool(secure_raw) if secure_raw is not None else environment == "production"

    prefixes_raw = _env("PROTECTED_PATH_PREFIXES", "/dashboard") or "/dashboard"
    protected_prefixes = tuple(_normalize_prefix(p) for p in re.split(r"[\s,]+", prefixes_raw) if p.strip("/ "))

    return AuthSettings(
        client_id=client_id,
        api_url=api_url,
        app_url=app_url,
        token_url=_env("OAUTH_TOKEN_URL") or f"{api_url}/oauth/token",
        redirect_uri=_env("OAUTH_REDIRECT_URI") or f"{app_url}/auth/callback",
        authorize_url=_env("OAUTH_AUTHORIZE_URL") or f"{api_url}/start-pkce",
        http_timeout=http_timeout,
        cookie_secure=cookie_secure,
        protected_prefixes=protected_prefixes or ("/dashboard",),
        environment=environment,
    )


def init_auth(app: Flask, settings: AuthSettings | None = None) -> AuthSettings:
    """
    Validate and attach auth settings to Flask `app.config`.

    Returns the parsed `AuthSettings` for convenience.
    """

    settings = settings or load_auth_settings()
    app.config["AUTH_SETTINGS"] = settings
    return settings


def get_settings(app: Flask | None = None) -> AuthSettings:
    app = app or current_app  # type: ignore[assignment]
    settings = app.config.get("AUTH_SETTINGS")
    if not isinstance(settings, AuthSettings):
        raise RuntimeError("Auth settings not initialized. Call auth.config.init_auth(app) during app startup.")
    return settings
