"""
Access rule business logic.

Defaults are hardcoded; a stored copy, when present, is shallow-merged over
them per role. Saving replaces the stored copy wholesale.
"""

import copy
from typing import Dict, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.access.models import AccessRule
from flashdash.apps.access.schemas import AccessRules
from flashdash.utils.logger import get_logger

logger = get_logger(__name__)

Rules = Dict[str, Dict[str, bool]]

DEFAULT_RULES: Rules = {
    "admin": {
        "dashboard": True,
        "reports": True,
        "leadIntake": True,
        "userMapping": True,
        "accessControl": True,
    },
    "opener": {
        "dashboard": True,
        "reports": True,
        "leadIntake": False,
        "userMapping": False,
        "accessControl": False,
    },
    "intake": {
        "dashboard": True,
        "reports": True,
        "leadIntake": True,
        "userMapping": False,
        "accessControl": False,
    },
    # Legacy role: dashboard plus lead intake, as before the opener/intake split.
    "agent": {
        "dashboard": True,
        "reports": False,
        "leadIntake": True,
        "userMapping": False,
        "accessControl": False,
    },
}


def merge_rules(stored: Optional[Mapping[str, Mapping[str, bool]]], defaults: Rules = DEFAULT_RULES) -> Rules:
    """
    Effective rules: a stored role replaces that role's defaults wholesale.

    Roles only present in `stored` are kept. Roles `stored` omits keep their
    defaults. Flags a stored role omits are absent, so they read as denied.
    """
    merged = copy.deepcopy(defaults)
    for role, flags in (stored or {}).items():
        merged[role] = dict(flags)
    return merged


def has_permission(rules: Rules, role: Optional[str], flag: str) -> bool:
    """Unknown roles and unknown flags are denied."""
    if not role:
        return False
    return bool(rules.get(role, {}).get(flag, False))


async def load_stored_rules(session: AsyncSession) -> Rules:
    rows = await AccessRule.find_many(db=session, order_by="role")
    return {row.role: dict(row.permissions) for row in rows}


async def get_effective_rules(session: AsyncSession) -> Rules:
    return merge_rules(await load_stored_rules(session))


async def replace_rules(session: AsyncSession, rules: AccessRules) -> Rules:
    """Drop the stored copy and write `rules` in its place, in one commit."""
    await AccessRule.delete_many(db=session, commit=False)
    await session.flush()
    for role, flags in rules.root.items():
        await AccessRule.create(db=session, commit=False, role=role, permissions=dict(flags))
    await session.commit()

    logger.info(f"Access rules replaced for roles: {sorted(rules.root)}")
    return merge_rules(rules.root)
