"""Security and authentication utilities."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import HTTPException, Request

from rangevote.core import config
from rangevote.core.constants import SHARE_TOKEN_BYTES

ACCESS_TOKEN_COOKIE = "access_token"


def generate_share_token() -> str:
    """Generate a 256-bit URL-safe share token.

    ``secrets.token_urlsafe`` already emits the URL-safe base64 alphabet
    (``-`` and ``_`` instead of ``+`` and ``/``) with the ``=`` padding stripped.
    """
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT identifying ``user_id``.

    Issuing tokens belongs to the authentication service; this helper exists so
    that service and the test suite sign tokens the same way they are verified.
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)


def _read_token(request: Request) -> Optional[str]:
    """Find the access token in the cookie or the Authorization header."""
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def decode_user_id(token: str) -> str:
    """Verify ``token`` and return the user id it carries."""
    try:
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user_id


def verify_user_token(request: Request) -> str:
    """Return the verified user id, or 401 when the caller is anonymous."""
    token = _read_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return decode_user_id(token)


def optional_user_token(request: Request) -> Optional[str]:
    """Return the verified user id, or ``None`` for anonymous callers.

    A token that is present but invalid is still rejected.
    """
    token = _read_token(request)
    if not token:
        return None
    return decode_user_id(token)
