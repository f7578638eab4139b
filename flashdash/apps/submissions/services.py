"""
Lead submission business logic.

Flow:
1. Trim string values
2. Check the required ForthCRM fields
3. Form-encode and POST to ForthCRM (bounded timeout)
4. Record the outcome in `submissions`, success or error
5. Return ForthCRM's answer, or raise UpstreamFailure with its detail
"""

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.submissions.models import STATUS_ERROR, STATUS_SUCCESS, Submission
from flashdash.apps.submissions.schemas import LeadSubmissionResult
from flashdash.core.forth_client import ForthClient, ForthError
from flashdash.utils.exceptions import (
    MissingFieldsException,
    ServerMisconfiguredException,
    UpstreamFailureException,
)
from flashdash.utils.logger import get_logger
from flashdash.utils.metrics import lead_submission_count

logger = get_logger(__name__)

# Required by ForthCRM's lead intake.
REQUIRED_FIELDS = [
    "Fname", "Lname", "phone", "email",
    "address", "city", "state", "zip",
    "DOB", "SSN", "monthly_income", "total_unsecured_debt",
]

SUCCESS_PREFIX = "Success:"


def sanitize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Trim every string value; leave other values as they are."""
    return {
        key: value.strip() if isinstance(value, str) else value
        for key, value in payload.items()
    }


def find_missing_fields(payload: Dict[str, Any]) -> List[str]:
    """Required fields that are absent, null, or empty strings, in canonical order."""
    return [
        field for field in REQUIRED_FIELDS
        if payload.get(field) is None or payload.get(field) == ""
    ]


def _strip_prefix(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.startswith(SUCCESS_PREFIX):
        return value[len(SUCCESS_PREFIX):].strip() or None
    return None


def extract_file_number(forth_response: Any) -> Optional[str]:
    """
    Pull the Forth file number out of a ForthCRM response.

    Checked in order:
    - the body itself is "Success:<n>"
    - a `message` field holding "Success:<n>"
    - a `file_number` field
    - any string field holding "Success:<n>"
    """
    direct = _strip_prefix(forth_response)
    if direct:
        return direct

    if not isinstance(forth_response, dict):
        return None

    from_message = _strip_prefix(forth_response.get("message"))
    if from_message:
        return from_message

    file_number = forth_response.get("file_number")
    if file_number not in (None, ""):
        return str(file_number)

    for value in forth_response.values():
        found = _strip_prefix(value)
        if found:
            return found
    return None


async def _record(
    session: AsyncSession,
    payload: Dict[str, Any],
    status: str,
    forth_response: Any,
    employee_id: Optional[uuid.UUID],
) -> None:
    await Submission.create(
        db=session,
        employee_id=employee_id,
        payload=payload,
        forth_status=status,
        forth_response=forth_response,
    )


async def _record_quietly(session: AsyncSession, **kwargs: Any) -> None:
    """Persist a submission record; a storage failure is logged, never raised."""
    try:
        await _record(session, **kwargs)
    except Exception:
        await session.rollback()
        logger.exception(f"Failed to save {kwargs.get('status')} submission to database")


async def submit_lead(
    session: AsyncSession,
    forth: ForthClient,
    raw_payload: Dict[str, Any],
    employee_id: Optional[uuid.UUID] = None,
) -> LeadSubmissionResult:
    """
    Validate a lead, forward it to ForthCRM and log the outcome.

    Raises:
        MissingFieldsException: required fields absent (nothing is stored)
        ServerMisconfiguredException: FORTH_CRM_URL not configured
        UpstreamFailureException: ForthCRM failed; an error record was attempted
    """
    payload = sanitize_payload(raw_payload)

    missing = find_missing_fields(payload)
    if missing:
        lead_submission_count.labels(outcome="rejected").inc()
        raise MissingFieldsException(missing)

    if not forth.url:
        raise ServerMisconfiguredException("FORTH_CRM_URL not configured")

    logger.info(f"Submitting lead to Forth: {payload.get('Fname')} {payload.get('Lname')}")

    try:
        forth_response = await forth.submit_lead(payload)
    except ForthError as e:
        logger.error(f"Forth error (status={e.status_code}): {e.detail}")
        lead_submission_count.labels(outcome="error").inc()
        await _record_quietly(
            session,
            payload=payload,
            status=STATUS_ERROR,
            forth_response=e.detail,
            employee_id=employee_id,
        )
        raise UpstreamFailureException(details=e.detail)

    logger.info(f"Forth response: {forth_response}")
    lead_submission_count.labels(outcome="success").inc()
    await _record_quietly(
        session,
        payload=payload,
        status=STATUS_SUCCESS,
        forth_response=forth_response,
        employee_id=employee_id,
    )

    return LeadSubmissionResult(
        forth_response=forth_response,
        file_number=extract_file_number(forth_response),
    )
