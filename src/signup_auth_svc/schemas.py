import re
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"\d")


class SignupRequest(BaseModel):
    """
    Pydantic model for signup request containing full name, email and password.
    """
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(..., alias="fullName", min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_full_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not (_LOWER.search(value) and _UPPER.search(value) and _DIGIT.search(value)):
            raise ValueError("Password must contain uppercase, lowercase, and number")
        return value


class LoginRequest(BaseModel):
    """
    Pydantic model for login request containing email and password.
    """
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    """
    A stored user without its password hash.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    email: str
    created_at: datetime
    updated_at: datetime


class PublicUser(BaseModel):
    id: str
    fullName: str
    email: str


class AuthResult(BaseModel):
    """
    Successful outcome of signup or login.
    """
    success: bool = True
    message: str
    token: str
    user: PublicUser


class ApiResponse(BaseModel):
    """
    Uniform response envelope: {success, message, data | error}.
    """
    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None
