"""
Roster Backend — User Service (Accounts & Authentication)
==========================================================

What:  Registration, login, admin seeding and the password-reset flow.
How:   Password records come from roster.security.credentials; access
       tokens from roster.security.tokens. Persistence through the
       request's AsyncSession (commit happens in get_db_session).
Who:   Called by the auth routes and by the lifespan handler (ensure_admin).

Password reset flow:
    1. Admin calls issue_reset_token(username) → token + expiry stored on user
    2. Admin hands the token to the user out of band
    3. User calls reset_password(username, token, new_password)
       → validate_reset_token() → new record stored, token cleared
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.config import settings
from roster.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from roster.models.user import User, UserRole
from roster.security.credentials import (
    check_password_strength,
    generate_reset_token,
    hash_password,
    validate_reset_token,
    verify_password,
)
from roster.security.tokens import create_access_token

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "Invalid username or password"
INVALID_RESET_MESSAGE = "Invalid or expired reset token"


class UserService:
    """
    Business logic for user accounts.

    Error Handling Strategy:
        Unknown user and wrong password raise the same AuthenticationError.
        SQLAlchemy failures are wrapped in DatabaseError.
    """

    async def get_by_username(self, db: AsyncSession, username: str) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error loading user %s: %s", username, str(e))
            raise DatabaseError(context={"operation": "get_user"})

    def _require_strong_password(self, password: str, field: str) -> None:
        strength = check_password_strength(password)
        if strength.score < settings.min_password_score:
            raise ValidationError(
                message=(
                    f"Password is too weak ({strength.level}, score {strength.score}/6). "
                    f"A score of at least {settings.min_password_score} is required."
                ),
                field=field,
                context={
                    "score": strength.score,
                    "level": strength.level,
                    "recommendations": strength.recommendations,
                },
            )

    async def register(self, db: AsyncSession, username: str, password: str) -> User:
        """
        Create a regular (role=User) account.

        Raises:
            ConflictError: username already exists
            ValidationError: password scores below min_password_score
        """
        if await self.get_by_username(db, username) is not None:
            raise ConflictError(
                message="User already exists",
                context={"username": username},
            )

        self._require_strong_password(password, field="password")

        user = User(
            username=username,
            password_hash=hash_password(password),
            role=UserRole.USER,
        )
        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Concurrent registration won the unique index on username
            logger.info("Username %s taken during registration", username)
            raise ConflictError(
                message="User already exists",
                context={"username": username},
            )
        except SQLAlchemyError as e:
            logger.error("Database error registering %s: %s", username, str(e))
            raise DatabaseError(context={"operation": "register"})

        logger.info("Registered user %s", username)
        return user

    async def authenticate(
        self, db: AsyncSession, username: str, password: str
    ) -> Tuple[User, str]:
        """
        Verify credentials and issue an access token.

        Returns:
            (user, jwt)

        Raises:
            AuthenticationError: unknown user or wrong password
        """
        user = await self.get_by_username(db, username)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login for username %s", username)
            raise AuthenticationError(message=INVALID_LOGIN_MESSAGE)

        token = create_access_token(
            user_id=str(user.id),
            username=user.username,
            role=user.role,
        )
        logger.info("User %s logged in", username)
        return user, token

    async def ensure_admin(self, db: AsyncSession) -> Optional[User]:
        """Seed the configured Admin account when no Admin exists yet."""
        try:
            result = await db.execute(
                select(User).where(User.role == UserRole.ADMIN).limit(1)
            )
            if result.scalar_one_or_none() is not None:
                return None

            admin = User(
                username=settings.admin_username,
                password_hash=hash_password(settings.admin_password),
                role=UserRole.ADMIN,
            )
            db.add(admin)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error seeding admin: %s", str(e))
            raise DatabaseError(context={"operation": "ensure_admin"})

        logger.info("Seeded admin account '%s'", settings.admin_username)
        return admin

    async def issue_reset_token(self, db: AsyncSession, username: str) -> User:
        """
        Store a fresh reset token on the user, replacing any pending one.

        Raises:
            NotFoundError: no such user
        """
        user = await self.get_by_username(db, username)
        if user is None:
            raise NotFoundError(resource="user", resource_id=username)

        user.reset_token = generate_reset_token()
        user.reset_token_expires_at = datetime.now(timezone.utc) + timedelta(
            minutes=settings.reset_token_ttl_minutes
        )
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error issuing reset token for %s: %s", username, str(e))
            raise DatabaseError(context={"operation": "issue_reset_token"})

        logger.info("Issued password reset token for %s", username)
        return user

    async def reset_password(
        self, db: AsyncSession, username: str, token: str, new_password: str
    ) -> None:
        """
        Replace the user's password if the reset token matches and is unexpired.

        Raises:
            AuthenticationError: unknown user, wrong token or expired token
            ValidationError: new password scores below min_password_score
        """
        user = await self.get_by_username(db, username)
        if user is None or not validate_reset_token(
            token, user.reset_token, user.reset_token_expires_at
        ):
            logger.info("Rejected password reset for %s", username)
            raise AuthenticationError(message=INVALID_RESET_MESSAGE)

        self._require_strong_password(new_password, field="new_password")

        user.password_hash = hash_password(new_password)
        user.reset_token = None
        user.reset_token_expires_at = None
        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error resetting password for %s: %s", username, str(e))
            raise DatabaseError(context={"operation": "reset_password"})

        logger.info("Password reset completed for %s", username)


user_service = UserService()
