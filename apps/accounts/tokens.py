"""
JWT issuing and verification for API authentication
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from django.conf import settings
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from apps.core.exceptions import AuthenticationException

logger = logging.getLogger(__name__)


def generate_token(user) -> str:
    """Sign a token carrying the user's id, email and role."""
    now = datetime.now(timezone.utc)
    payload = {
        "id": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises AuthenticationException for expired or invalid tokens.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationException("Token expired")
    except JWTError as e:
        logger.debug(f"Rejected token: {e}")
        raise AuthenticationException("Invalid token")

    if not payload.get("id"):
        raise AuthenticationException("Invalid token")
    return payload
