"""
Access rule schemas.
"""

from typing import Dict
from pydantic import RootModel, field_validator

PERMISSION_FLAGS = ("dashboard", "reports", "leadIntake", "userMapping", "accessControl")


class AccessRules(RootModel[Dict[str, Dict[str, bool]]]):
    """Role -> {permission flag -> allowed}. Sent and stored wholesale."""

    @field_validator("root")
    @classmethod
    def validate_flags(cls, v: Dict[str, Dict[str, bool]]) -> Dict[str, Dict[str, bool]]:
        for role, flags in v.items():
            if not role:
                raise ValueError("Role name cannot be empty")
            unknown = sorted(set(flags) - set(PERMISSION_FLAGS))
            if unknown:
                raise ValueError(f"Unknown permission flags for {role}: {', '.join(unknown)}")
        return v
