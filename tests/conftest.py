"""Shared fixtures: auth settings, app, test client and fake provider responses."""
import json
from unittest.mock import patch

import pytest
import requests

from app import create_app
from auth.config import AuthSettings


def make_response(status=200, payload=None, text=None):
    """Build a real `requests.Response` carrying a JSON payload or raw text."""
    resp = requests.Response()
    resp.status_code = status
    if payload is not None:
        resp._content = json.dumps(payload).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = (text or "").encode("utf-8")
        resp.headers["Content-Type"] = "text/html"
    resp.encoding = "utf-8"
    return resp


TOKENS = {
    "token_type": "Bearer",
    "expires_in": 1800,
    "access_token": "access-1",
    "refresh_token": "refresh-1",
}

NEW_TOKENS = {
    "token_type": "Bearer",
    "expires_in": 7200,
    "access_token": "access-2",
    "refresh_token": "refresh-2",
}


@pytest.fixture
def settings():
    return AuthSettings(
        client_id="client-123",
        api_url="http://api.test",
        app_url="http://app.test",
        token_url="http://api.test/oauth/token",
        redirect_uri="http://app.test/auth/callback",
        authorize_url="http://api.test/start-pkce",
        http_timeout=5.0,
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config.update(TESTING=True)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def provider():
    """Patch the provider transport; set `.side_effect` or `.return_value` per test."""
    with patch("auth.passport.requests.request") as mock:
        yield mock


def set_cookie_header(resp, name):
    """Return the Set-Cookie header for `name`, or None."""
    for header in resp.headers.getlist("Set-Cookie"):
        if header.startswith(f"{name}="):
            return header
    return None
