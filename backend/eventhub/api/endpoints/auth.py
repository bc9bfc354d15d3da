from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from eventhub.core.database import get_db
from eventhub.core.config import settings
from eventhub.core.logging_config import logger, set_user_usn
from eventhub.core.rate_limiter import auth_rate_limit
from eventhub.core.session_store import SessionStore, SessionData, get_session_store
from eventhub.modules.auth.dependencies import get_current_session, get_session_token
from eventhub.schemas.auth import (
    SignUpRequest,
    SignInRequest,
    AuthResponse,
    ProfileResponse,
    MessageResponse,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ResetPasswordResponse,
)
from eventhub.services.auth_service import auth_service
from eventhub.services.email_service import EmailService, get_email_service
from eventhub.services.password_service import PasswordRecoveryService

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.SESSION_COOKIE_SECURE,
        path="/",
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@auth_rate_limit()
async def signup(
    request: Request,
    response: Response,
    data: SignUpRequest,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    """Register a student and sign them in"""
    student = await auth_service.sign_up(db, data)

    token = await store.create(student)
    _set_session_cookie(response, token)
    set_user_usn(student.usn)

    return AuthResponse(
        message="Student registered successfully!",
        userUSN=student.usn,
        userName=student.name,
    )


@router.post("/signin", response_model=AuthResponse)
@auth_rate_limit()
async def signin(
    request: Request,
    response: Response,
    credentials: SignInRequest,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
):
    student = await auth_service.sign_in(db, credentials.usn, credentials.password)

    token = await store.create(student)
    _set_session_cookie(response, token)
    set_user_usn(student.usn)

    return AuthResponse(
        message="Signed in successfully",
        userUSN=student.usn,
        userName=student.name,
    )


@router.post("/signout", response_model=MessageResponse)
async def signout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    store: SessionStore = Depends(get_session_store),
):
    """
    Destroy the current session. Succeeds even when there is no session.
    """
    session = await store.resolve(token)
    await store.destroy(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME, path="/")

    if session is not None:
        logger.log_auth_event("signout", success=True, usn=session.usn)

    return MessageResponse(message="Signed out successfully")


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    current: SessionData = Depends(get_current_session),
    db: AsyncSession = Depends(get_db),
):
    """Get current student's profile"""
    student = await auth_service.get_student(db, current.usn)
    return ProfileResponse(
        userUSN=student.usn,
        userName=student.name,
        semester=student.semester,
        mobile=student.mobile,
        email=student.email,
    )


@router.post("/forgot-password", response_model=MessageResponse)
@auth_rate_limit()
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """
    Email a password reset link.

    The response is the same whether or not the email is registered.
    """
    recovery = PasswordRecoveryService(email_service)
    message = await recovery.request_reset(db, body.email)
    return MessageResponse(message=message)


@router.post("/reset-password", response_model=ResetPasswordResponse)
async def reset_password(
    body: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    """Reset password using token from forgot-password email"""
    recovery = PasswordRecoveryService(email_service)
    student = await recovery.reset_password(db, body.token, body.newPassword)
    return ResetPasswordResponse(
        message="Password has been reset successfully",
        userName=student.name,
    )
