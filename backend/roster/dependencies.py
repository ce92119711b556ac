"""
Roster Backend — Authentication Dependencies
=============================================

What:  FastAPI dependencies resolving the caller from a bearer JWT.
How:   HTTPBearer extracts the token; decode_access_token verifies it; the
       user row is re-loaded so deleted accounts and role changes apply
       immediately instead of at token expiry.

    get_current_user  → any authenticated user
    require_admin     → Admin role only
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.exceptions import AuthenticationError, PermissionDeniedError
from roster.models.user import User, UserRole
from roster.security.tokens import decode_access_token

# auto_error=False: a missing header goes through AuthenticationError (401)
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError(message="Not authenticated")

    payload = decode_access_token(credentials.credentials)

    result = await db.execute(select(User).where(User.username == payload.name))
    user = result.scalar_one_or_none()
    if user is None or str(user.id) != payload.sub:
        raise AuthenticationError()
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        raise PermissionDeniedError(required_role=UserRole.ADMIN)
    return user
