"""Login request and token schemas for user authentication."""

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    """Payload for login attempts."""

    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthCode(BaseModel):
    """One-time code to hand to ``/auth/callback``."""

    code: str
    expires_in: int
