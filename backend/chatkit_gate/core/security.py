from __future__ import annotations

import hashlib
import hmac
import math
import re
import secrets
import time
from dataclasses import dataclass
from typing import Any

from itsdangerous import Signer


CHATKIT_AUTH_COOKIE = "ecotrips.chatkit.auth"

TOKEN_VERSION = "v1"
TOKEN_TTL_SECONDS = 60 * 10

_NONCE_BYTES = 16
_EXPIRES_AT_RE = re.compile(r"-?[0-9]{1,20}")


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: int
    max_age: int


def _now_seconds(now: float | None) -> int:
    return math.floor(time.time() if now is None else now)


def _sign(secret: str, payload: str) -> str:
    # HMAC-SHA256 без деривации ключа, подпись в base64url без паддинга.
    signer = Signer(secret, key_derivation="none", digest_method=hashlib.sha256)
    return signer.get_signature(payload).decode("ascii")


def _safe_equal(a: str, b: str) -> bool:
    a_bytes = a.encode("utf-8")
    b_bytes = b.encode("utf-8")
    if len(a_bytes) != len(b_bytes):
        return False
    return hmac.compare_digest(a_bytes, b_bytes)


def issue_auth_token(secret: str, now: float | None = None) -> IssuedToken:
    """
    Issue a signed token of the form ``v1.<nonce>.<expires_at>.<signature>``.

    ``now`` is a POSIX timestamp in seconds; wall-clock time is used when omitted.
    """
    if not secret:
        raise ValueError("token secret must not be empty")
    nonce = secrets.token_hex(_NONCE_BYTES)
    issued_at = _now_seconds(now)
    expires_at = issued_at + TOKEN_TTL_SECONDS
    payload = f"{TOKEN_VERSION}.{nonce}.{expires_at}"
    token = f"{payload}.{_sign(secret, payload)}"
    return IssuedToken(token=token, expires_at=expires_at, max_age=max(1, expires_at - issued_at))


def verify_auth_token(token: str, secret: str, now: float | None = None) -> bool:
    if not token or not secret or not token.isascii():
        return False
    parts = token.split(".")
    if len(parts) != 4:
        return False
    version, nonce, expires_at_raw, signature = parts
    if version != TOKEN_VERSION:
        return False
    if not nonce:
        return False
    if not _EXPIRES_AT_RE.fullmatch(expires_at_raw):
        return False
    if int(expires_at_raw) <= _now_seconds(now):
        return False
    try:
        expected = _sign(secret, f"{version}.{nonce}.{expires_at_raw}")
    except UnicodeEncodeError:
        return False
    return _safe_equal(expected, signature)


def needs_reissue(cookie_value: str | None, secret: str, now: float | None = None) -> IssuedToken | None:
    """Return a fresh token when the cookie is absent or fails verification, else None."""
    if cookie_value and verify_auth_token(cookie_value, secret, now=now):
        return None
    return issue_auth_token(secret, now=now)


def auth_cookie_kwargs(issued: IssuedToken) -> dict[str, Any]:
    return {
        "key": CHATKIT_AUTH_COOKIE,
        "value": issued.token,
        "max_age": issued.max_age,
        "httponly": True,
        "secure": True,
        "samesite": "strict",
        "path": "/",
    }
