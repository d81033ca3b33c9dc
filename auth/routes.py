"""
Auth routes (Passport / PKCE).

Endpoints:
  - GET  /auth/login
  - GET  /auth/callback
  - GET  /auth/logout
  - GET  /auth/forbidden

Implementation notes:
  - The PKCE verifier lives in the short-lived `pkce_verifier` cookie between
    /auth/login and /auth/callback and is deleted once the code is exchanged.
  - The provider's token response is stored verbatim in the `oauth_data` cookie.
  - Callback failures are answered with a JSON error payload.
"""

from __future__ import annotations

import logging
import traceback
from urllib.parse import urlencode

from flask import Blueprint, jsonify, make_response, redirect, render_template, request, url_for

from . import passport
from .config import get_settings
from .cookies import (
    VERIFIER_COOKIE,
    clear_token_cookie,
    clear_verifier_cookie,
    set_token_cookie,
    set_verifier_cookie,
)
from .errors import ProviderError
from .pkce import new_pkce_pair

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

INVALID_STATE_MESSAGE = "Invalid state: missing code or verifier"


@auth_bp.get("/login")
def login():
    """Start the login flow by redirecting the user to the Passport server."""

    s = get_settings()
    pair = new_pkce_pair()

    params = urlencode({"code_challenge": pair.challenge, "code_challenge_method": "S256"})
    sep = "&" if "?" in s.authorize_url else "?"
    resp = redirect(f"{s.authorize_url}{sep}{params}")
    set_verifier_cookie(resp, s, pair.verifier)
    return resp


@auth_bp.get("/callback")
def callback():
    """Handle the OAuth2 redirect from Passport and store the token bundle."""

    code = request.args.get("code")
    verifier = request.cookies.get(VERIFIER_COOKIE)

    if not code or not verifier:
        payload = {"error": INVALID_STATE_MESSAGE}
        # Passport sends error params when the user denies or the request is invalid.
        if request.args.get("error"):
            payload["provider_error"] = request.args["error"]
            payload["provider_error_description"] = request.args.get("error_description")
            logger.warning("Authorization failed at provider: %s", request.args["error"])
        return jsonify(payload), 400

    s = get_settings()
    try:
        bundle = passport.exchange_code(s, code, verifier)
    except ProviderError as e:
        logger.warning("Token exchange failed: status=%s code=%s", e.status, e.code)
        return (
            jsonify(
                {
                    "error": "OAuth Error",
                    "message": e.message,
                    "code": e.code,
                    "status": e.status,
                    "details": e.details,
                }
            ),
            500,
        )
    except Exception as e:
        logger.exception("Unexpected error during token exchange")
        payload = {"error": "OAuth Error", "message": str(e), "name": type(e).__name__}
        if not s.is_production:
            payload["stack"] = traceback.format_exc()
        return jsonify(payload), 500

    resp = redirect(s.dashboard_url)
    set_token_cookie(resp, s, bundle)
    clear_verifier_cookie(resp, s)
    logger.info("Signed in; token bundle stored")
    return resp


@auth_bp.get("/logout")
def logout():
    """
    Drop the local token bundle and go back to the landing page.

    Tokens are not revoked at the provider.
    """

    s = get_settings()
    resp = redirect(url_for("index"))
    clear_token_cookie(resp, s)
    clear_verifier_cookie(resp, s)
    return resp


@auth_bp.get("/forbidden")
def forbidden():
    return make_response(render_template("forbidden.html"), 403)
