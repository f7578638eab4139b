"""
Submission schemas.
"""

from typing import Any, Optional
from pydantic import BaseModel


class LeadSubmissionResult(BaseModel):
    """What the intake form gets back after ForthCRM accepted a lead."""
    ok: bool = True
    forth_response: Any = None
    file_number: Optional[str] = None
