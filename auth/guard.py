"""
Access guard for protected paths.

Every request whose path falls under one of `AuthSettings.protected_prefixes`
goes through `evaluate()`:

  no cookie / unparsable cookie / missing tokens  -> login
  GET /api/user/show 2xx                          -> allowed
                     401 -> one refresh attempt   -> refreshed (cookie rewritten) | login
                     403                          -> forbidden
                     anything else                -> login

Other paths bypass the guard entirely and never reach the provider.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from flask import Flask, g, redirect, request, url_for

from . import passport
from .config import AuthSettings, get_settings
from .cookies import TOKEN_COOKIE, clear_token_cookie, set_token_cookie
from .errors import InvalidTokenBundle, ProviderError
from .tokens import TokenBundle

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    ALLOWED = "allowed"
    REFRESHED = "refreshed"
    LOGIN = "login"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class GuardDecision:
    outcome: Outcome
    reason: str = ""
    bundle: TokenBundle | None = None
    user: Any = None


def is_protected(path: str, prefixes: Iterable[str]) -> bool:
    """True if `path` equals a protected prefix or lies beneath it."""

    for prefix in prefixes:
        if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
            return True
    return False


def _refresh(settings: AuthSettings, bundle: TokenBundle) -> GuardDecision:
    try:
        new_bundle = passport.refresh_tokens(settings, bundle.refresh_token)
    except ProviderError as e:
        logger.warning("Refresh token failed: status=%s code=%s", e.status, e.code)
        return GuardDecision(Outcome.LOGIN, reason="refresh failed")
    except (InvalidTokenBundle, ValueError) as e:
        logger.warning("Refresh returned an unusable token bundle: %s", e)
        return GuardDecision(Outcome.LOGIN, reason="refresh failed")

    logger.info("Access token refreshed")
    return GuardDecision(Outcome.REFRESHED, reason="token refreshed", bundle=new_bundle)


def evaluate(settings: AuthSettings, cookie_value: str | None) -> GuardDecision:
    """Run the guard state machine for one request's `oauth_data` cookie."""

    try:
        bundle = TokenBundle.from_cookie(cookie_value)
    except InvalidTokenBundle as e:
        logger.warning("Rejecting oauth_data cookie: %s", e)
        return GuardDecision(Outcome.LOGIN, reason="invalid cookie")

    if bundle is None:
        logger.info("No oauth_data cookie found")
        return GuardDecision(Outcome.LOGIN, reason="no cookie")

    try:
        user = passport.fetch_current_user(settings, bundle.access_token)
    except ProviderError as e:
        if e.status == 401:
            return _refresh(settings, bundle)
        if e.status == 403:
            logger.warning("Access denied: insufficient permissions")
            return GuardDecision(Outcome.FORBIDDEN, reason="forbidden")
        logger.warning("Token validation error: status=%s code=%s", e.status, e.code)
        return GuardDecision(Outcome.LOGIN, reason="validation failed")

    return GuardDecision(Outcome.ALLOWED, reason="token valid", bundle=bundle, user=user)


def init_guard(app: Flask) -> None:
    """Install the guard as request hooks on `app`."""

    @app.before_request
    def _guard_protected_paths():
        s = get_settings()
        if not is_protected(request.path, s.protected_prefixes):
            return None

        decision = evaluate(s, request.cookies.get(TOKEN_COOKIE))
        g.auth_decision = decision
        g.current_user = decision.user

        if decision.outcome is Outcome.FORBIDDEN:
            return redirect(url_for("auth.forbidden"))
        if decision.outcome is Outcome.LOGIN:
            resp = redirect(url_for("auth.login"))
            if TOKEN_COOKIE in request.cookies:
                clear_token_cookie(resp, s)
            return resp
        return None

    @app.after_request
    def _rewrite_refreshed_tokens(resp):
        decision = g.get("auth_decision")
        if decision is not None and decision.outcome is Outcome.REFRESHED:
            set_token_cookie(resp, get_settings(), decision.bundle)
        return resp
