from __future__ import annotations

import hashlib
import hmac
from typing import List, Optional

from fastapi import Depends, Header

from .config import Settings, get_settings
from .errors import Unauthenticated


class AuthContext:
    def __init__(self, key_id: str, method: str = "bearer"):
        self.key_id = key_id
        self.method = method


def _key_fingerprint(token: str) -> str:
    # Short, stable identifier for logs; the token itself is never logged
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        return ""
    # The prefix is removed before trimming so a bare "Bearer " counts as missing
    value = authorization.lstrip()
    if value.startswith("Bearer ") or value.rstrip() == "Bearer":
        value = value[len("Bearer"):]
    return value.strip()


def is_allowed(token: str, allowed_keys: List[str]) -> bool:
    """Exact, case-sensitive membership. Every entry is compared to keep timing flat."""
    matched = False
    for key in allowed_keys:
        if hmac.compare_digest(key.encode("utf-8"), token.encode("utf-8")):
            matched = True
    return matched


async def ensure_authenticated(
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
    settings: Settings = Depends(get_settings),
) -> AuthContext:
    token = _bearer_token(authorization)
    if not token:
        raise Unauthenticated("Missing Authorization header")

    if not is_allowed(token, settings.get_allowed_api_keys()):
        raise Unauthenticated("Unauthorized")

    return AuthContext(key_id=_key_fingerprint(token))
