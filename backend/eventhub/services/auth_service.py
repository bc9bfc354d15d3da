"""
Auth Service - student registration and credential checks

Session issuing is left to the caller (see eventhub.core.session_store);
this service only deals with Student rows.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from email_validator import validate_email, EmailNotValidError

from eventhub.core.config import settings
from eventhub.core.exceptions import (
    ValidationError,
    ConflictError,
    InvalidCredentialsError,
    StudentNotFoundError,
)
from eventhub.core.logging_config import logger
from eventhub.core.security import (
    get_password_hash,
    verify_password,
    is_valid_usn,
    is_valid_mobile,
)
from eventhub.models.student import Student
from eventhub.schemas.auth import SignUpRequest


def _clean(value) -> str:
    return str(value).strip() if value is not None else ""


class AuthService:
    """Signup, signin and profile lookup"""

    async def sign_up(self, db: AsyncSession, data: SignUpRequest) -> Student:
        """
        Register a new student.

        Raises:
            ValidationError: missing field, bad USN/semester/mobile/email
            ConflictError: USN or email already registered
        """
        name = _clean(data.name)
        usn = _clean(data.usn)
        sem = _clean(data.sem)
        mobile = _clean(data.mobno)
        email = _clean(data.email)
        password = data.password or ""

        if not (name and usn and sem and mobile and email and password):
            raise ValidationError("All fields are required")

        if not is_valid_usn(usn):
            raise ValidationError("Invalid USN format", field="usn")

        try:
            semester = int(sem)
        except ValueError:
            raise ValidationError("Semester must be between 1 and 8", field="sem")
        if not 1 <= semester <= 8:
            raise ValidationError("Semester must be between 1 and 8", field="sem")

        if not is_valid_mobile(mobile):
            raise ValidationError("Mobile number must be 10 digits", field="mobno")

        try:
            email = validate_email(email, check_deliverability=False).normalized
        except EmailNotValidError:
            raise ValidationError("Invalid email address", field="email")

        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long",
                field="password"
            )

        existing = await db.execute(
            select(Student.usn).where(or_(Student.usn == usn, Student.email == email)).limit(1)
        )
        if existing.first() is not None:
            raise ConflictError("Student with this USN or email already exists")

        student = Student(
            usn=usn,
            name=name,
            semester=semester,
            mobile=mobile,
            email=email,
            hashed_password=get_password_hash(password),
        )
        db.add(student)
        try:
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same USN/email
            await db.rollback()
            raise ConflictError("Student with this USN or email already exists")

        logger.log_auth_event("signup", success=True, usn=usn)
        return student

    async def sign_in(self, db: AsyncSession, usn: str, password: str) -> Student:
        """
        Check credentials. Unknown USN and wrong password raise the same error.
        """
        usn = _clean(usn)
        if not usn or not password:
            raise ValidationError("USN and password are required")

        result = await db.execute(select(Student).where(Student.usn == usn))
        student = result.scalar_one_or_none()

        if student is None or not verify_password(password, student.hashed_password):
            logger.log_auth_event("signin", success=False, usn=usn, reason="invalid credentials")
            raise InvalidCredentialsError()

        logger.log_auth_event("signin", success=True, usn=usn)
        return student

    async def get_student(self, db: AsyncSession, usn: str) -> Student:
        result = await db.execute(select(Student).where(Student.usn == usn))
        student = result.scalar_one_or_none()
        if student is None:
            raise StudentNotFoundError(usn)
        return student


auth_service = AuthService()
