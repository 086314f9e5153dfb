"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from minilinkedin.schemas.user import UserResponse
from minilinkedin.services.auth import is_strong_password, normalize_email


class UserRegister(BaseModel):
    """User registration request."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)
    bio: str | None = Field(None, max_length=500)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize(cls, v):
        return normalize_email(v) if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def check_strength(cls, v: str) -> str:
        if not is_strong_password(v):
            raise ValueError(
                "Password is too weak: use at least 8 characters mixing upper and lower case "
                "letters, digits or symbols"
            )
        return v

    @field_validator("bio")
    @classmethod
    def strip_bio(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None


class UserLogin(BaseModel):
    """User login request."""

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_email(v)


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    message: str
    user: UserResponse
    token: str
    token_type: str = "bearer"  # noqa: S105
