"""
Roster Backend — Auth Route Handlers
=====================================

What:  Registration, login, current user, password tools and password reset.
How:   Thin handlers: validate the body with Pydantic, delegate to
       UserService or the credential helpers, shape the response.

Route Inventory:
    POST /api/auth/register                     create a User account
    POST /api/auth/login                        exchange credentials for a JWT
    GET  /api/auth/me                           the caller's account
    POST /api/auth/password-strength            score a candidate password
    GET  /api/auth/generate-password            random password with all classes
    POST /api/auth/users/{username}/reset-token Admin: issue a reset token
    POST /api/auth/password-reset               redeem a reset token
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.dependencies import get_current_user, require_admin
from roster.models.user import User
from roster.schemas.auth import (
    GeneratedPasswordResponse,
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    PasswordStrengthRequest,
    PasswordStrengthResponse,
    RegisterRequest,
    ResetTokenResponse,
    UserResponse,
)
from roster.schemas.common import ErrorResponse
from roster.security.credentials import (
    MAX_STRENGTH_SCORE,
    check_password_strength,
    generate_random_password,
)
from roster.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Password too weak", "model": ErrorResponse},
        409: {"description": "Username taken", "model": ErrorResponse},
    },
    summary="Register a new user account",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.register(db, username=body.username, password=body.password)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    user, token = await user_service.authenticate(
        db, username=body.username, password=body.password
    )
    return LoginResponse(token=token, role=user.role)


@router.get("/me", response_model=UserResponse, summary="Current user")
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    return UserResponse.model_validate(user)


@router.post(
    "/password-strength",
    response_model=PasswordStrengthResponse,
    summary="Score a password",
    description="Counts satisfied criteria out of 6 and lists what is missing.",
)
async def password_strength(body: PasswordStrengthRequest) -> PasswordStrengthResponse:
    result = check_password_strength(body.password)
    return PasswordStrengthResponse(
        score=result.score,
        max_score=MAX_STRENGTH_SCORE,
        level=result.level,
        recommendations=result.recommendations,
    )


@router.get(
    "/generate-password",
    response_model=GeneratedPasswordResponse,
    responses={400: {"description": "Length below 4", "model": ErrorResponse}},
    summary="Generate a random password",
)
async def generate_password(
    length: int = Query(default=12, le=128, description="Password length (min 4)"),
    include_special: bool = Query(default=True, description="Include !@#$%^&*..."),
    user: User = Depends(get_current_user),
) -> GeneratedPasswordResponse:
    # length < 4 is rejected by generate_random_password (InvalidInputError → 400)
    return GeneratedPasswordResponse(
        password=generate_random_password(length=length, include_special=include_special)
    )


@router.post(
    "/users/{username}/reset-token",
    response_model=ResetTokenResponse,
    responses={
        403: {"description": "Admin only", "model": ErrorResponse},
        404: {"description": "User not found", "model": ErrorResponse},
    },
    summary="Issue a password reset token (Admin)",
)
async def issue_reset_token(
    username: str,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> ResetTokenResponse:
    user = await user_service.issue_reset_token(db, username=username)
    logger.info("Admin %s issued a reset token for %s", admin.username, username)
    return ResetTokenResponse(
        username=user.username,
        reset_token=user.reset_token,
        expires_at=user.reset_token_expires_at,
    )


@router.post(
    "/password-reset",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        400: {"description": "New password too weak", "model": ErrorResponse},
        401: {"description": "Invalid or expired token", "model": ErrorResponse},
    },
    summary="Set a new password with a reset token",
)
async def password_reset(
    body: PasswordResetRequest,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await user_service.reset_password(
        db,
        username=body.username,
        token=body.token,
        new_password=body.new_password,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
