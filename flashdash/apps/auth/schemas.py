"""
Auth Pydantic schemas.

Input validation and output serialization for auth routes.
"""

import uuid
from pydantic import BaseModel, Field


# ── Request Schemas ───────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    """
    Login with email + password.

    Email is a plain string: a malformed address must fail exactly like an
    unknown one.
    """
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ── Response Schemas ──────────────────────────────────────────────────────────

class SessionUser(BaseModel):
    """User block returned with the token."""
    id: uuid.UUID
    email: str
    role: str
    agentName: str | None = None
    firstName: str | None = None
    lastName: str | None = None


class LoginResult(BaseModel):
    token: str
    user: SessionUser


class TokenClaims(BaseModel):
    """Decoded session token."""
    id: str
    email: str
    role: str
