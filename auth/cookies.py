"""
Cookie helpers.

Both cookies are http-only, SameSite=Lax and scoped to `/`; the `Secure` flag
follows `AuthSettings.cookie_secure`.
"""

from __future__ import annotations

from flask import Response

from .config import AuthSettings
from .tokens import TokenBundle

VERIFIER_COOKIE = "pkce_verifier"
TOKEN_COOKIE = "oauth_data"

VERIFIER_MAX_AGE = 600  # 10 minutes to finish signing in at the provider


def _cookie_options(settings: AuthSettings) -> dict:
    return {
        "httponly": True,
        "secure": settings.cookie_secure,
        "samesite": "Lax",
        "path": "/",
    }


def set_verifier_cookie(resp: Response, settings: AuthSettings, verifier: str) -> None:
    resp.set_cookie(VERIFIER_COOKIE, verifier, max_age=VERIFIER_MAX_AGE, **_cookie_options(settings))


def set_token_cookie(resp: Response, settings: AuthSettings, bundle: TokenBundle) -> None:
    resp.set_cookie(TOKEN_COOKIE, bundle.to_cookie(), max_age=bundle.max_age, **_cookie_options(settings))


def clear_verifier_cookie(resp: Response, settings: AuthSettings) -> None:
    resp.delete_cookie(VERIFIER_COOKIE, path="/", secure=settings.cookie_secure, httponly=True, samesite="Lax")


def clear_token_cookie(resp: Response, settings: AuthSettings) -> None:
    resp.delete_cookie(TOKEN_COOKIE, path="/", secure=settings.cookie_secure, httponly=True, samesite="Lax")
