"""
Access control router.

Reading the effective rules needs any valid token; saving needs admin.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.access.schemas import AccessRules
from flashdash.apps.access.services import get_effective_rules, replace_rules
from flashdash.apps.auth.services import require_admin, verify_user
from flashdash.db.session import get_session
from flashdash.utils.responses import success_response

router = APIRouter(prefix="/api/admin", tags=["Access Control"])


@router.get("/access", dependencies=[Depends(verify_user)])
async def get_access(session: AsyncSession = Depends(get_session)):
    """Defaults merged with the stored rules."""
    rules = await get_effective_rules(session=session)
    return success_response(message="Access rules", rules=rules)


@router.post("/access", dependencies=[Depends(require_admin)])
async def save_access(
    rules: AccessRules,
    session: AsyncSession = Depends(get_session),
):
    """Replace the stored rules with the full map sent."""
    effective = await replace_rules(session=session, rules=rules)
    return success_response(message="Access rules saved", rules=effective)
