"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserSignUp(BaseModel):
    """User sign-up request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    name: str = Field(..., min_length=2, max_length=255)


class UserSignIn(BaseModel):
    """User sign-in request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class UserResponse(BaseModel):
    """Public view of a user. Never carries the password digest."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    user: UserResponse
    token: str
    token_type: str = "bearer"  # noqa: S105


class VerifyResponse(BaseModel):
    """Result of verifying a bearer token."""

    user: UserResponse
    user_id: str
