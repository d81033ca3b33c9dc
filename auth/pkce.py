"""
PKCE (Proof Key for Code Exchange) helpers.

The verifier never leaves this app except in the token request; only its
S256 challenge is sent with the authorization redirect:

    code_challenge = BASE64URL(SHA256(ASCII(code_verifier)))
"""

from __future__ import annotations

import base64
import hashlib
import secrets
import string
from dataclasses import dataclass

# RFC 7636 section 4.1 unreserved characters.
VERIFIER_ALPHABET = string.ascii_letters + string.digits + "-._~"
MIN_VERIFIER_LENGTH = 43
MAX_VERIFIER_LENGTH = 128


@dataclass(frozen=True)
class PKCEPair:
    verifier: str
    challenge: str


def generate_code_verifier(length: int = 64) -> str:
    """Generate a cryptographically random code verifier of `length` characters."""

    if not MIN_VERIFIER_LENGTH <= length <= MAX_VERIFIER_LENGTH:
        raise ValueError(
            f"PKCE code verifier length must be between {MIN_VERIFIER_LENGTH} and {MAX_VERIFIER_LENGTH}, got {length}."
        )
    return "".join(secrets.choice(VERIFIER_ALPHABET) for _ in range(length))


def generate_code_challenge(code_verifier: str) -> str:
    """Derive the S256 code challenge (base64url, no padding) for a verifier."""

    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def new_pkce_pair() -> PKCEPair:
    verifier = generate_code_verifier()
    return PKCEPair(verifier=verifier, challenge=generate_code_challenge(verifier))
