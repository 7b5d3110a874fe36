"""Attendance, overtime and reimbursement submission endpoints."""

from fastapi import APIRouter, status

from payslip_engine.api.dependencies import DbSession, EmployeeActor
from payslip_engine.api.schemas import (
    AttendanceCreate,
    AttendanceResponse,
    ErrorResponse,
    OvertimeCreate,
    OvertimeResponse,
    ReimbursementCreate,
    ReimbursementResponse,
)
from payslip_engine.services.attendance_service import AttendanceService

router = APIRouter(tags=["ledger"])

SUBMISSION_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


@router.post(
    "/attendance",
    response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
    responses=SUBMISSION_ERRORS,
)
async def submit_attendance(
    db: DbSession,
    actor: EmployeeActor,
    payload: AttendanceCreate,
) -> AttendanceResponse:
    mark = await AttendanceService(db).submit_attendance(
        payload.date, payload.period_id, actor
    )
    await db.commit()
    return AttendanceResponse.model_validate(mark)


@router.post(
    "/overtime",
    response_model=OvertimeResponse,
    status_code=status.HTTP_201_CREATED,
    responses=SUBMISSION_ERRORS,
)
async def submit_overtime(
    db: DbSession,
    actor: EmployeeActor,
    payload: OvertimeCreate,
) -> OvertimeResponse:
    claim = await AttendanceService(db).submit_overtime(
        payload.date, payload.hours, payload.period_id, actor
    )
    await db.commit()
    return OvertimeResponse.model_validate(claim)


@router.post(
    "/reimbursements",
    response_model=ReimbursementResponse,
    status_code=status.HTTP_201_CREATED,
    responses=SUBMISSION_ERRORS,
)
async def submit_reimbursement(
    db: DbSession,
    actor: EmployeeActor,
    payload: ReimbursementCreate,
) -> ReimbursementResponse:
    claim = await AttendanceService(db).submit_reimbursement(
        payload.amount, payload.description, payload.period_id, actor
    )
    await db.commit()
    return ReimbursementResponse.model_validate(claim)
