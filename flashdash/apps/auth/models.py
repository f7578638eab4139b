"""
Auth ORM model.

Employee accounts. Column names follow the Supabase `employees` table.
"""

from typing import Optional
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from flashdash.db.base_model import BaseModel

# "agent" is the legacy role from before opener/intake were split.
VALID_ROLES = ("admin", "intake", "opener", "agent")
DEFAULT_ROLE = "agent"


class Employee(BaseModel):
    """
    Call-center employee.

    `password_hash` never leaves the service layer.
    """

    __tablename__ = "employees"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=DEFAULT_ROLE)
    agent_name: Mapped[Optional[str]] = mapped_column("agentName", String(255), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column("firstName", String(255), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column("lastName", String(255), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
