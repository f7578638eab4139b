"""
Auth business logic.

Handles login, dev seeding, and JWT-based caller verification.
`verify_user` and `require_admin` are the FastAPI dependencies used by every
secured route. Verification is stateless: the role in the token is trusted
until the token expires.
"""

import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.auth.models import Employee
from flashdash.apps.auth.schemas import LoginRequest, LoginResult, SessionUser, TokenClaims
from flashdash.config.settings import settings
from flashdash.utils.security import (
    burn_password_check,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from flashdash.utils.exceptions import (
    EmployeeAlreadyExistsException,
    ForbiddenException,
    InvalidCredentialsException,
    SeedDisabledException,
    ServerMisconfiguredException,
    UnauthorizedException,
)
from flashdash.utils.logger import get_logger
from flashdash.utils.metrics import login_count

logger = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


# ── FastAPI Auth Dependencies ─────────────────────────────────────────────────

async def verify_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> TokenClaims:
    """
    FastAPI dependency: validates the Bearer token and returns its claims.

    Raises 401 if the header is missing or the token is invalid or expired.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedException()

    payload = decode_token(credentials.credentials)
    return TokenClaims(
        id=str(payload["sub"]),
        email=str(payload.get("email", "")),
        role=str(payload["role"]),
    )


async def optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[TokenClaims]:
    """
    FastAPI dependency for open routes: the caller's claims when a valid
    token with a UUID subject is sent, otherwise None.
    """
    if credentials is None:
        return None
    try:
        claims = await verify_user(credentials)
        uuid.UUID(claims.id)
    except (UnauthorizedException, ValueError):
        return None
    return claims


async def require_admin(user: TokenClaims = Depends(verify_user)) -> TokenClaims:
    """FastAPI dependency: admin role claim required (403 otherwise)."""
    if user.role != "admin":
        logger.warning(f"Admin route refused for {user.email} role={user.role}")
        raise ForbiddenException()
    return user


# ── Auth Services ─────────────────────────────────────────────────────────────

async def login_employee(
    session: AsyncSession,
    data: LoginRequest,
) -> LoginResult:
    """
    Authenticate an employee and issue a session token.

    Unknown email, inactive account and wrong password all raise the same
    InvalidCredentialsException; the unknown-email path still pays for one
    bcrypt verification.
    """
    if not settings.JWT_SECRET_KEY:
        logger.error("JWT_SECRET_KEY not set!")
        raise ServerMisconfiguredException()

    employee = await Employee.find_one(db=session, email=data.email)

    if employee is None:
        burn_password_check(data.password)
        login_count.labels(outcome="failure").inc()
        raise InvalidCredentialsException()

    password_ok = verify_password(data.password, employee.password_hash)
    if not password_ok or not employee.active:
        login_count.labels(outcome="failure").inc()
        raise InvalidCredentialsException()

    token = create_access_token(
        employee_id=str(employee.id),
        email=employee.email,
        role=employee.role,
    )

    login_count.labels(outcome="success").inc()
    logger.info(f"Employee logged in: {employee.email} role={employee.role}")
    return LoginResult(
        token=token,
        user=SessionUser(
            id=employee.id,
            email=employee.email,
            role=employee.role,
            agentName=employee.agent_name,
            firstName=employee.first_name,
            lastName=employee.last_name,
        ),
    )


def seed_allowed() -> bool:
    """Seeding needs ENABLE_DEV_SEED and a non-production environment."""
    return settings.ENABLE_DEV_SEED and not settings.is_production


async def seed_admin(session: AsyncSession) -> Employee:
    """
    Insert the bootstrap admin from SEED_EMAIL / SEED_PASSWORD.

    Credentials come from server configuration only, never from the request.
    """
    if not seed_allowed():
        raise SeedDisabledException()

    email = settings.SEED_EMAIL
    password = settings.SEED_PASSWORD
    if not email or not password:
        raise ServerMisconfiguredException("Seed credentials not configured")

    if await Employee.exists(db=session, email=email):
        raise EmployeeAlreadyExistsException()

    employee = await Employee.create(
        db=session,
        email=email,
        password_hash=hash_password(password),
        role="admin",
        active=True,
    )
    logger.info(f"Seeded admin employee: {employee.email}")
    return employee
