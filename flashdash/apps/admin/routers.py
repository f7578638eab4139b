"""
Admin router.

Entry/exit only, no logic here. Every route requires an admin token.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from flashdash.apps.admin.schemas import EmployeeCreate, EmployeeUpdate, PasswordReset
from flashdash.apps.admin.services import (
    create_employee,
    delete_employee,
    export_submissions_csv,
    list_employees,
    reset_password,
    update_employee,
)
from flashdash.apps.auth.services import require_admin
from flashdash.db.session import get_session
from flashdash.utils.responses import success_response

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/employees")
async def get_employees(session: AsyncSession = Depends(get_session)):
    """List employees, newest first."""
    employees = await list_employees(session=session)
    return success_response(
        message="Employees",
        employees=[e.model_dump(mode="json") for e in employees],
    )


@router.post("/employees")
async def post_employee(
    data: EmployeeCreate,
    session: AsyncSession = Depends(get_session),
):
    """Create an employee."""
    employee = await create_employee(session=session, data=data)
    return success_response(
        message="Employee created",
        employee=employee.model_dump(mode="json"),
    )


@router.put("/employees/{employee_id}/reset-password")
async def put_reset_password(
    employee_id: str,
    data: PasswordReset,
    session: AsyncSession = Depends(get_session),
):
    """Overwrite an employee's password."""
    await reset_password(session=session, employee_id=employee_id, data=data)
    return success_response(message="Password reset successfully")


@router.put("/employees/{employee_id}")
async def put_employee(
    employee_id: str,
    data: EmployeeUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Partially update an employee."""
    employee = await update_employee(session=session, employee_id=employee_id, data=data)
    return success_response(
        message="Employee updated",
        employee=employee.model_dump(mode="json"),
    )


@router.delete("/employees/{employee_id}")
async def remove_employee(
    employee_id: str,
    session: AsyncSession = Depends(get_session),
):
    """Hard-delete an employee."""
    await delete_employee(session=session, employee_id=employee_id)
    return success_response(message="Employee deleted successfully")


@router.get("/export")
async def export(session: AsyncSession = Depends(get_session)):
    """Download every submission as CSV."""
    body = await export_submissions_csv(session=session)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="submissions.csv"'},
    )
