"""
Password recovery: forgot-password issues a one-hour reset token and emails
a link; reset-password consumes it.

Only the SHA-256 digest of the token is stored on the student row, and the
token is cleared on use, so a consumed or expired token cannot be replayed.
"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from eventhub.core.config import settings
from eventhub.core.exceptions import (
    ValidationError,
    InvalidResetTokenError,
    ExpiredResetTokenError,
    ExternalServiceError,
)
from eventhub.core.logging_config import logger
from eventhub.core.security import generate_reset_token, hash_reset_token, get_password_hash
from eventhub.models.student import Student
from eventhub.services.email_service import EmailService

GENERIC_RESET_MESSAGE = "If an account with that email exists, a password reset link has been sent."


class PasswordRecoveryService:

    def __init__(self, email_service: EmailService):
        self.email_service = email_service

    async def request_reset(self, db: AsyncSession, email: Optional[str], now: Optional[datetime] = None) -> str:
        """
        Issue a reset token for ``email`` if it belongs to a student.

        Always returns the same message whether or not the email exists.
        """
        email = (email or "").strip()
        if not email:
            raise ValidationError("Email is required", field="email")

        result = await db.execute(select(Student).where(Student.email == email))
        student = result.scalar_one_or_none()
        if student is None:
            logger.log_auth_event("forgot_password", success=False, reason="unknown email")
            return GENERIC_RESET_MESSAGE

        now = now or datetime.utcnow()
        token = generate_reset_token()
        student.reset_token_hash = hash_reset_token(token)
        student.reset_token_expires = now + timedelta(minutes=settings.PASSWORD_RESET_TOKEN_EXPIRE_MINUTES)
        await db.commit()

        sent = await self.email_service.send_password_reset_email(
            to_email=student.email,
            user_name=student.name,
            reset_token=token,
        )
        if not sent:
            raise ExternalServiceError("email", "Failed to send password reset email")

        logger.log_auth_event("forgot_password", success=True, usn=student.usn)
        return GENERIC_RESET_MESSAGE

    async def reset_password(
        self,
        db: AsyncSession,
        token: Optional[str],
        new_password: Optional[str],
        now: Optional[datetime] = None,
    ) -> Student:
        """
        Set a new password using a reset token.

        Raises:
            ValidationError: token missing or password too short
            InvalidResetTokenError: no student holds this token
            ExpiredResetTokenError: token past its expiry
        """
        if not token:
            raise ValidationError("Reset token is required", field="token")
        if not new_password or len(new_password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
                field="newPassword"
            )

        result = await db.execute(
            select(Student).where(Student.reset_token_hash == hash_reset_token(token))
        )
        student = result.scalar_one_or_none()
        if student is None:
            raise InvalidResetTokenError()

        now = now or datetime.utcnow()
        if student.reset_token_expires is None or now > student.reset_token_expires:
            raise ExpiredResetTokenError()

        student.hashed_password = get_password_hash(new_password)
        student.reset_token_hash = None
        student.reset_token_expires = None
        await db.commit()

        logger.log_auth_event("password_reset", success=True, usn=student.usn)
        return student
