"""
User mapping business logic.

Mappings are keyed by the ForthCRM user id: setting an existing key
re-points it, deleting an unknown key is a 404.
"""

import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.auth.models import Employee
from flashdash.apps.mapping.models import UserMapping
from flashdash.apps.mapping.schemas import MappingDelete, MappingResponse, MappingSet
from flashdash.utils.exceptions import ResourceNotFoundException
from flashdash.utils.logger import get_logger

logger = get_logger(__name__)


def _employee_label(employee: Employee) -> str:
    full_name = " ".join(part for part in (employee.first_name, employee.last_name) if part)
    return employee.agent_name or full_name or employee.email


async def _employee_name(session: AsyncSession, flash_user_id: str) -> Optional[str]:
    """Display name of the mapped employee, when the id is a known employee."""
    try:
        employee_id = uuid.UUID(flash_user_id)
    except ValueError:
        return None
    employee = await Employee.get_by_id(db=session, id=employee_id)
    return _employee_label(employee) if employee else None


async def list_mappings(session: AsyncSession) -> List[MappingResponse]:
    rows = await UserMapping.find_many(db=session, order_by="forth_user_id")
    return [MappingResponse.model_validate(row) for row in rows]


async def set_mapping(session: AsyncSession, data: MappingSet) -> MappingResponse:
    """Create or re-point the mapping for `data.forthUserId`."""
    flash_name = data.flashUserName
    if flash_name is None:
        flash_name = await _employee_name(session, data.flashUserId)

    mapping = await UserMapping.find_one(db=session, forth_user_id=data.forthUserId)
    if mapping is None:
        mapping = await UserMapping.create(
            db=session,
            forth_user_id=data.forthUserId,
            flash_user_id=data.flashUserId,
            forth_user_name=data.forthUserName,
            flash_user_name=flash_name,
        )
    else:
        mapping.flash_user_id = data.flashUserId
        if data.forthUserName is not None:
            mapping.forth_user_name = data.forthUserName
        mapping.flash_user_name = flash_name
        await mapping.save(db=session)

    logger.info(f"Mapped Forth user {data.forthUserId} -> {data.flashUserId}")
    return MappingResponse.model_validate(mapping)


async def delete_mapping(session: AsyncSession, data: MappingDelete) -> None:
    mapping = await UserMapping.find_one(db=session, forth_user_id=data.forthUserId)
    if mapping is None:
        raise ResourceNotFoundException("Mapping not found")
    await mapping.delete(db=session)
    logger.info(f"Removed mapping for Forth user {data.forthUserId}")
