"""
Dependency injection for FastAPI.

Provides singleton instances of outbound clients.
"""

from functools import lru_cache
from flashdash.core.forth_client import ForthClient
from flashdash.config.settings import settings


@lru_cache()
def get_forth_client() -> ForthClient:
    """Get ForthCRM client singleton."""
    return ForthClient(
        url=settings.FORTH_CRM_URL,
        timeout=settings.FORTH_CRM_TIMEOUT_SECONDS,
    )
