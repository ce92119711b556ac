"""
Roster Backend — JWT Access Tokens
===================================

What:  Issues and validates HS256 bearer tokens for authenticated users.
How:   python-jose encodes/decodes; issuer, audience and expiry come from settings.
Who:   UserService.authenticate() issues; roster.dependencies validates.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from roster.config import settings
from roster.exceptions import AuthenticationError
from roster.schemas.auth import TokenPayload

logger = logging.getLogger(__name__)


def create_access_token(
    user_id: str,
    username: str,
    role: str,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token carrying the user's id, name and role."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.access_token_expire_hours))

    claims: Dict[str, Any] = {
        "sub": str(user_id),
        "name": username,
        "role": role,
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenPayload:
    """
    Verify signature, expiry, issuer and audience.

    Raises:
        AuthenticationError: the token is malformed, forged, expired or
            issued for another audience
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
        return TokenPayload(**payload)
    except (JWTError, PydanticValidationError) as e:
        logger.info("Rejected access token: %s", type(e).__name__)
        raise AuthenticationError()
