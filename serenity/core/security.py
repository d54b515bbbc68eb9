"""Access-token helpers for tokens minted by the hosted identity service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel, Field, ValidationError

ALGORITHM = "HS256"
AUDIENCE = "authenticated"


class TokenPayload(BaseModel):
    sub: str
    exp: datetime
    iat: datetime | None = None
    aud: str | list[str] | None = None
    email: str | None = None
    role: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)


def decode_access_token(token: str, secret: str) -> TokenPayload:
    """Verify signature, audience and expiry; raise ``ValueError`` otherwise."""

    try:
        decoded = jwt.decode(token, secret, algorithms=[ALGORITHM], audience=AUDIENCE)
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
    try:
        return TokenPayload.model_validate(decoded)
    except ValidationError as exc:
        raise ValueError("Invalid token payload") from exc


def peek_expiry(token: str) -> datetime | None:
    """Read ``exp`` without verifying; only for display and bookkeeping."""

    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc)
