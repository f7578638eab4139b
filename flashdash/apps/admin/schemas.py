"""
Admin Pydantic schemas.

Employee create/update payloads and the public employee view.
Name fields keep the front end's camelCase keys.
"""

from datetime import datetime
from typing import Optional
import uuid
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

from flashdash.apps.auth.models import DEFAULT_ROLE, VALID_ROLES

MIN_PASSWORD_LENGTH = 6


def _check_role(v: Optional[str]) -> Optional[str]:
    if v is not None and v not in VALID_ROLES:
        raise ValueError(f"Invalid role. Must be one of: {', '.join(VALID_ROLES)}")
    return v


def _check_email(v: Optional[str]) -> Optional[str]:
    """
    Shape check only: no DNS lookups, and the domain need not be publicly
    deliverable (`.test` addresses pass).
    """
    if v is None:
        return v
    try:
        return validate_email(
            v,
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        ).normalized
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email format: {e}")


# ── Request Schemas ───────────────────────────────────────────────────────────

class EmployeeCreate(BaseModel):
    """New employee. Email and password are required."""
    email: str
    password: str = Field(..., min_length=1)
    role: str = Field(default=DEFAULT_ROLE)
    agentName: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Optional[str]) -> Optional[str]:
        return _check_role(v)


class EmployeeUpdate(BaseModel):
    """
    Partial update.

    Only keys present in the request body are applied (see `model_fields_set`).
    A name key sent as null or "" clears the field to "".
    An empty password means "leave unchanged".
    """
    email: Optional[str] = None
    role: Optional[str] = None
    agentName: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    password: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: Optional[str]) -> Optional[str]:
        return _check_email(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: Optional[str]) -> Optional[str]:
        return _check_role(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class PasswordReset(BaseModel):
    newPassword: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


# ── Response Schemas ──────────────────────────────────────────────────────────

class EmployeeResponse(BaseModel):
    """Public employee data (no password hash)."""
    id: uuid.UUID
    email: str
    role: str
    agentName: Optional[str] = Field(None, validation_alias="agent_name")
    firstName: Optional[str] = Field(None, validation_alias="first_name")
    lastName: Optional[str] = Field(None, validation_alias="last_name")
    active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
