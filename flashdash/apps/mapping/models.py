"""
User mapping ORM model.

Links a ForthCRM user to a FlashDash employee for report attribution.
"""

from typing import Optional
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from flashdash.db.base_model import BaseModel


class UserMapping(BaseModel):
    __tablename__ = "user_mappings"

    forth_user_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    flash_user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    forth_user_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    flash_user_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
