"""
Access rule ORM model.

One row per role; `permissions` maps a permission flag to a bool.
"""

from typing import Dict
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from flashdash.apps.submissions.models import JSONType
from flashdash.db.base_model import BaseModel


class AccessRule(BaseModel):
    __tablename__ = "access_rules"

    role: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    permissions: Mapped[Dict[str, bool]] = mapped_column(JSONType, nullable=False)
