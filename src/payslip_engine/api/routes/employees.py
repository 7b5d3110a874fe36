"""Employee directory endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payslip_engine.api.dependencies import AdminActor, DbSession
from payslip_engine.api.schemas import EmployeeCreate, EmployeeResponse, ErrorResponse
from payslip_engine.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register_employee(
    db: DbSession,
    actor: AdminActor,
    payload: EmployeeCreate,
) -> EmployeeResponse:
    """Register an employee or admin."""
    employee = await EmployeeService(db).register_employee(
        payload.username, payload.role, payload.monthly_salary, actor
    )
    await db.commit()
    return EmployeeResponse.model_validate(employee)


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    db: DbSession,
    actor: AdminActor,
    employee_id: Annotated[str, Path()],
) -> EmployeeResponse:
    employee = await EmployeeService(db).find_employee(employee_id)
    return EmployeeResponse.model_validate(employee)
