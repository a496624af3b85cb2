from pydantic import BaseModel, Field

from jeevraksha.models.common import Role


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    full_name: str | None = None
    phone: str | None = None
    # Self-service sign-up cannot grant admin
    role: Role = Role.CITIZEN


class LoginRequest(BaseModel):
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


class ProfileUpdate(BaseModel):
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    avatar_url: str | None = None


class Profile(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    phone: str | None = None
    address: str | None = None
    avatar_url: str | None = None
    role: Role = Role.CITIZEN
    created_at: str
    updated_at: str | None = None


class AuthUser(BaseModel):
    """The caller of the current request, as resolved from its bearer token."""

    id: str
    email: str | None = None
    role: Role = Role.CITIZEN
    token: str | None = None
