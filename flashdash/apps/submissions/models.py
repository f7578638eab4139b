"""
Submission ORM model.

Append-only log of every lead forwarded to ForthCRM, failures included.
"""

import uuid
from typing import Any, Optional
from sqlalchemy import JSON, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from flashdash.db.base_model import BaseModel

# JSONB on Supabase, plain JSON elsewhere.
JSONType = JSON().with_variant(JSONB(), "postgresql")

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


class Submission(BaseModel):
    """One lead submission attempt and ForthCRM's answer."""

    __tablename__ = "submissions"

    employee_id: Mapped[Optional[uuid.UUID]] = mapped_column(nullable=True, index=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    forth_status: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    forth_response: Mapped[Optional[Any]] = mapped_column(JSONType, nullable=True)
