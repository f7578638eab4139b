"""
Auth router.

Entry/exit only, no logic here. Calls auth services.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.auth.schemas import LoginRequest
from flashdash.apps.auth.services import login_employee, seed_admin
from flashdash.db.session import get_session
from flashdash.utils.responses import success_response, auth_response

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login")
async def login(
    data: LoginRequest,
    session: AsyncSession = Depends(get_session),
):
    """Authenticate and receive an 8-hour session token."""
    result = await login_employee(session=session, data=data)
    return auth_response(
        token=result.token,
        user=result.user.model_dump(mode="json"),
    )


@router.post("/seed")
async def seed(session: AsyncSession = Depends(get_session)):
    """Create the bootstrap admin. Disabled in production."""
    employee = await seed_admin(session=session)
    return success_response(
        message="Admin seeded",
        ok=True,
        data={"id": str(employee.id), "email": employee.email, "role": employee.role},
    )
