"""
Laravel Passport client.

Three sequential calls against the identity provider, each bounded by
`AuthSettings.http_timeout` and never retried:
  - authorization code exchange (grant_type=authorization_code, PKCE)
  - refresh token exchange (grant_type=refresh_token)
  - "current user" lookup used to validate an access token
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from .config import AuthSettings
from .errors import ProviderError
from .tokens import TokenBundle

logger = logging.getLogger(__name__)

FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


def _response_details(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


def _send(method: str, url: str, timeout: float, **kwargs: Any) -> requests.Response:
    """Issue a request, converting transport failures and non-2xx answers to `ProviderError`."""

    try:
        resp = requests.request(method, url, timeout=timeout, **kwargs)
    except requests.Timeout as e:
        raise ProviderError(f"Request to {url} timed out after {timeout}s", code="timeout") from e
    except requests.ConnectionError as e:
        raise ProviderError(f"Could not connect to {url}: {e}", code="connection_error") from e
    except requests.RequestException as e:
        raise ProviderError(f"Request to {url} failed: {e}", code="request_error") from e

    if not 200 <= resp.status_code < 300:
        raise ProviderError(
            f"Request failed with status code {resp.status_code}",
            status=resp.status_code,
            details=_response_details(resp),
        )
    return resp


def _post_token_form(settings: AuthSettings, url: str, form: dict[str, str]) -> TokenBundle:
    resp = _send("POST", url, settings.http_timeout, data=form, headers=FORM_HEADERS)
    # A non-JSON 2xx body surfaces as ValueError; a JSON body without tokens as InvalidTokenBundle.
    return TokenBundle.from_mapping(resp.json())


def exchange_code(settings: AuthSettings, code: str, verifier: str) -> TokenBundle:
    """Exchange an authorization code and its PKCE verifier for a token bundle."""

    form = {
        "grant_type": "authorization_code",
        "client_id": settings.client_id,
        "redirect_uri": settings.redirect_uri,
        "code": code,
        "code_verifier": verifier,
    }
    logger.debug("Exchanging authorization code at %s", settings.token_url)
    return _post_token_form(settings, settings.token_url, form)


def refresh_tokens(settings: AuthSettings, refresh_token: str) -> TokenBundle:
    """Trade a refresh token for a new token bundle."""

    form = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": settings.client_id,
    }
    logger.debug("Refreshing access token at %s", settings.refresh_url)
    return _post_token_form(settings, settings.refresh_url, form)


def fetch_current_user(settings: AuthSettings, access_token: str) -> Any:
    """
    Validate `access_token` by fetching the authenticated user.

    Raises `ProviderError` with `status` 401 for an expired token and 403 for
    a user without access.
    """

    resp = _send(
        "GET",
        settings.user_url,
        settings.http_timeout,
        headers={
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        },
    )
    return _response_details(resp)
