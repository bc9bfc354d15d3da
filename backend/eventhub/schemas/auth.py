from pydantic import BaseModel, Field
from typing import Optional, Union


class SignUpRequest(BaseModel):
    """Signup form body. Fields are checked in AuthService.sign_up so that
    missing ones produce the form's own error messages."""
    name: Optional[str] = None
    usn: Optional[str] = None
    sem: Optional[Union[int, str]] = None
    mobno: Optional[Union[str, int]] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SignInRequest(BaseModel):
    usn: Optional[str] = None
    password: Optional[str] = None


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    userUSN: str
    userName: str


class ProfileResponse(BaseModel):
    userUSN: str
    userName: str
    semester: int
    mobile: str
    email: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    newPassword: Optional[str] = Field(None, description="At least MIN_PASSWORD_LENGTH characters")


class ResetPasswordResponse(MessageResponse):
    userName: str
