"""
User mapping router. Admin only.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.auth.services import require_admin
from flashdash.apps.mapping.schemas import MappingDelete, MappingSet
from flashdash.apps.mapping.services import delete_mapping, list_mappings, set_mapping
from flashdash.db.session import get_session
from flashdash.utils.responses import success_response

router = APIRouter(
    prefix="/api/forthcrm/mapping",
    tags=["User Mapping"],
    dependencies=[Depends(require_admin)],
)


@router.get("")
async def get_mappings(session: AsyncSession = Depends(get_session)):
    mappings = await list_mappings(session=session)
    return success_response(
        message="User mappings",
        mappings=[m.model_dump() for m in mappings],
    )


@router.post("/set")
async def post_mapping(data: MappingSet, session: AsyncSession = Depends(get_session)):
    """Create or update the mapping for one ForthCRM user."""
    mapping = await set_mapping(session=session, data=data)
    return success_response(message="Mapping saved", mapping=mapping.model_dump())


@router.post("/delete")
async def post_delete(data: MappingDelete, session: AsyncSession = Depends(get_session)):
    await delete_mapping(session=session, data=data)
    return success_response(message="Mapping deleted")
