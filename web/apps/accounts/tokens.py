"""Issue and verify signed bearer tokens (JWT, HS256 by default).

Access tokens authenticate API calls; refresh tokens can only be exchanged
at ``POST /auth/refresh`` for a new pair. Both carry the account id in
``sub`` and the account role, and are told apart by the ``type`` claim.
"""

import uuid
from datetime import datetime, timedelta, timezone

from django.conf import settings
from jose import ExpiredSignatureError, JWTError, jwt

from apps.common.errors import Unauthorized

ACCESS = "access"
REFRESH = "refresh"


def _issue(user, token_type: str, ttl_seconds: int) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.pk),
        "username": user.username,
        "role": user.role,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def issue_access_token(user) -> str:
    return _issue(user, ACCESS, settings.JWT_ACCESS_TTL_SECONDS)


def issue_refresh_token(user) -> str:
    return _issue(user, REFRESH, settings.JWT_REFRESH_TTL_SECONDS)


def decode_token(token: str, expected_type: str = ACCESS) -> dict:
    """Verify ``token`` and return its claims.

    Args:
        token: Encoded JWT as received from the client.
        expected_type: ``"access"`` or ``"refresh"``.

    Returns:
        dict: The decoded claims.

    Raises:
        Unauthorized: If the signature is invalid, the token expired, or the
            token is of the wrong type.
    """
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError as e:
        raise Unauthorized("Token has expired") from e
    except JWTError as e:
        raise Unauthorized("Invalid token") from e
    if claims.get("type") != expected_type:
        raise Unauthorized("Invalid token type")
    if not str(claims.get("sub", "")).isdigit():
        raise Unauthorized("Invalid token subject")
    return claims
