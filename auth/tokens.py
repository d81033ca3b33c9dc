"""
Token bundle stored in the `oauth_data` cookie.

The provider's JSON response is kept verbatim (`raw`) so whatever extra fields
Passport returns survive a round trip through the cookie. Only the fields the
guard relies on are validated, and validation fails closed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

from .errors import InvalidTokenBundle

DEFAULT_MAX_AGE = 3600
MAX_EXPIRES_IN = 10 * 365 * 86400  # cookie Expires must stay a representable date


def _require_token(data: Mapping[str, Any], key: str) -> str:
    val = data.get(key)
    if not isinstance(val, str) or not val.strip():
        raise InvalidTokenBundle(f"Token bundle is missing {key}.")
    return val


def _optional_expires_in(data: Mapping[str, Any]) -> int | None:
    val = data.get("expires_in")
    if val is None:
        return None
    # bool is an int subclass; a JSON true is not a lifetime.
    if isinstance(val, bool):
        raise InvalidTokenBundle("Token bundle expires_in must be an integer.")
    if isinstance(val, str) and val.strip().isdigit():
        val = int(val)
    if not isinstance(val, int) or val < 0:
        raise InvalidTokenBundle("Token bundle expires_in must be a non-negative integer.")
    if val > MAX_EXPIRES_IN:
        raise InvalidTokenBundle(f"Token bundle expires_in exceeds {MAX_EXPIRES_IN} seconds.")
    return val


@dataclass(frozen=True)
class TokenBundle:
    access_token: str
    refresh_token: str
    expires_in: int | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_mapping(cls, data: Any) -> "TokenBundle":
        if not isinstance(data, dict):
            raise InvalidTokenBundle("Token bundle must be a JSON object.")
        return cls(
            access_token=_require_token(data, "access_token"),
            refresh_token=_require_token(data, "refresh_token"),
            expires_in=_optional_expires_in(data),
            raw=dict(data),
        )

    @classmethod
    def from_cookie(cls, value: str | None) -> "TokenBundle | None":
        """
        Parse the `oauth_data` cookie value.

        Returns None when the cookie is absent; raises `InvalidTokenBundle`
        when it is present but unusable.
        """

        if not value:
            return None
        try:
            data = json.loads(value)
        except ValueError as e:
            raise InvalidTokenBundle(f"oauth_data cookie is not valid JSON: {e}") from e
        return cls.from_mapping(data)

    @property
    def max_age(self) -> int:
        return self.expires_in or DEFAULT_MAX_AGE

    def to_cookie(self) -> str:
        return json.dumps(self.raw, separators=(",", ":"))
