"""
Admin business logic.

Employee CRUD, password resets and the submissions CSV export.
Callers are already admin-checked by the router dependency.
"""

import csv
import io
import json
import uuid
from typing import Any, List

from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.admin.schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate, PasswordReset
from flashdash.apps.auth.models import Employee
from flashdash.apps.submissions.models import Submission
from flashdash.utils.exceptions import (
    EmployeeAlreadyExistsException,
    InvalidInputException,
    ResourceNotFoundException,
)
from flashdash.utils.logger import get_logger
from flashdash.utils.security import hash_password

logger = get_logger(__name__)

# Request key -> ORM attribute for the three-state name fields.
NAME_FIELDS = {
    "agentName": "agent_name",
    "firstName": "first_name",
    "lastName": "last_name",
}

EXPORT_COLUMNS = ["id", "created_at", "employee_id", "forth_status", "payload", "forth_response"]
EXPORT_BATCH_SIZE = 1000


async def _get_employee_or_404(session: AsyncSession, employee_id: str) -> Employee:
    try:
        key = uuid.UUID(employee_id)
    except ValueError:
        raise ResourceNotFoundException("Employee not found")
    employee = await Employee.get_by_id(db=session, id=key)
    if employee is None:
        raise ResourceNotFoundException("Employee not found")
    return employee


async def list_employees(session: AsyncSession) -> List[EmployeeResponse]:
    """All employees, newest first."""
    employees = await Employee.find_many(db=session, order_by="created_at", order_desc=True)
    return [EmployeeResponse.model_validate(e) for e in employees]


async def create_employee(session: AsyncSession, data: EmployeeCreate) -> EmployeeResponse:
    """
    Create an employee account.

    Guard: Reject duplicate emails.
    Password is hashed before storage.
    """
    if await Employee.exists(db=session, email=data.email):
        raise EmployeeAlreadyExistsException()

    employee = await Employee.create(
        db=session,
        email=data.email,
        password_hash=hash_password(data.password),
        role=data.role,
        agent_name=data.agentName,
        first_name=data.firstName,
        last_name=data.lastName,
        active=True,
    )
    logger.info(f"Created employee: {employee.email} role={employee.role}")
    return EmployeeResponse.model_validate(employee)


async def update_employee(
    session: AsyncSession,
    employee_id: str,
    data: EmployeeUpdate,
) -> EmployeeResponse:
    """
    Apply a partial update.

    Only keys present in the request are touched. Name keys are three-state:
    absent (untouched), null/"" (stored as ""), or a value.
    """
    employee = await _get_employee_or_404(session, employee_id)
    provided = data.model_fields_set

    if "email" in provided:
        if not data.email:
            raise InvalidInputException("Invalid email format")
        if data.email != employee.email and await Employee.exists(db=session, email=data.email):
            raise EmployeeAlreadyExistsException()
        employee.email = data.email

    if "role" in provided:
        if not data.role:
            raise InvalidInputException("Role cannot be empty")
        employee.role = data.role

    for key, attr in NAME_FIELDS.items():
        if key in provided:
            setattr(employee, attr, getattr(data, key) or "")

    if "active" in provided and data.active is not None:
        employee.active = data.active

    if data.password:
        employee.password_hash = hash_password(data.password)

    await employee.save(db=session)
    logger.info(f"Updated employee {employee.id}: fields={sorted(provided)}")
    return EmployeeResponse.model_validate(employee)


async def delete_employee(session: AsyncSession, employee_id: str) -> None:
    """Hard delete."""
    employee = await _get_employee_or_404(session, employee_id)
    await employee.delete(db=session)
    logger.info(f"Deleted employee {employee_id}")


async def reset_password(
    session: AsyncSession,
    employee_id: str,
    data: PasswordReset,
) -> None:
    employee = await _get_employee_or_404(session, employee_id)
    employee.password_hash = hash_password(data.newPassword)
    await employee.save(db=session)
    logger.info(f"Password reset for employee {employee_id}")


def _csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, default=str)
    return str(value)


async def export_submissions_csv(session: AsyncSession) -> str:
    """Every submission record as CSV, newest first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL)
    writer.writerow(EXPORT_COLUMNS)

    exported = 0
    while True:
        batch = await Submission.find_many(
            db=session, limit=EXPORT_BATCH_SIZE, offset=exported
        )
        for sub in batch:
            writer.writerow([_csv_cell(getattr(sub, column)) for column in EXPORT_COLUMNS])
        exported += len(batch)
        if len(batch) < EXPORT_BATCH_SIZE:
            break

    logger.info(f"Exported {exported} submissions")
    return buffer.getvalue()
