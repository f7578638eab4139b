"""
Submissions router.

Entry/exit only. The lead proxy lives in services.
"""

import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.auth.schemas import TokenClaims
from flashdash.apps.auth.services import optional_user
from flashdash.apps.submissions.services import submit_lead
from flashdash.core.dependencies import get_forth_client
from flashdash.core.forth_client import ForthClient
from flashdash.db.session import get_session
from flashdash.utils.responses import success_response

router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.post("/submit-lead")
async def submit_lead_endpoint(
    payload: Dict[str, Any] = Body(...),
    user: Optional[TokenClaims] = Depends(optional_user),
    session: AsyncSession = Depends(get_session),
    forth: ForthClient = Depends(get_forth_client),
):
    """
    Forward a lead from the intake form to ForthCRM.

    The caller's employee id is attached to the record when a valid token
    is sent; the endpoint itself is open to the intake form.
    """
    employee_id = uuid.UUID(user.id) if user else None
    result = await submit_lead(
        session=session,
        forth=forth,
        raw_payload=payload,
        employee_id=employee_id,
    )
    return success_response(message="Lead submitted", **result.model_dump(mode="json"))
