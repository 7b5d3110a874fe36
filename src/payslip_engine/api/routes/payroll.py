"""Payroll run, payslip and summary endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path

from payslip_engine.api.dependencies import AdminActor, DbSession, EmployeeActor
from payslip_engine.api.schemas import (
    AttendanceResponse,
    ErrorResponse,
    OvertimeResponse,
    PayrollRunResponse,
    PayrollSummaryResponse,
    PayslipResponse,
    PeriodResponse,
    ReimbursementResponse,
    SummaryEntryResponse,
)
from payslip_engine.services.payroll_service import PayrollService
from payslip_engine.services.payslip_service import PayslipService
from payslip_engine.services.state_machine import PeriodStatus

router = APIRouter(prefix="/periods/{period_id}", tags=["payroll"])


@router.post(
    "/payroll",
    response_model=PayrollRunResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def run_payroll(
    db: DbSession,
    actor: AdminActor,
    period_id: Annotated[str, Path()],
) -> PayrollRunResponse:
    """Run payroll for the period, freezing it."""
    result = await PayrollService(db).run_payroll(period_id, actor)
    await db.commit()
    return PayrollRunResponse.model_validate(result.run)


@router.get(
    "/payslip",
    response_model=PayslipResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payslip(
    db: DbSession,
    actor: EmployeeActor,
    period_id: Annotated[str, Path()],
) -> PayslipResponse:
    """Get the caller's payslip for the period."""
    payslip = await PayslipService(db).generate_payslip(period_id, actor.user_id)

    period = PeriodResponse.model_validate(payslip.period)
    period.status = PeriodStatus.FROZEN.value
    return PayslipResponse(
        period=period,
        attendance=[AttendanceResponse.model_validate(a) for a in payslip.attendance],
        overtime=[OvertimeResponse.model_validate(o) for o in payslip.overtime],
        reimbursements=[
            ReimbursementResponse.model_validate(r) for r in payslip.reimbursements
        ],
        attendance_days=payslip.attendance_days,
        overtime_hours=payslip.overtime_hours,
        base_salary=payslip.base_salary,
        overtime_pay=payslip.overtime_pay,
        reimbursement_amount=payslip.reimbursement_amount,
        total_pay=payslip.total_pay,
    )


@router.get(
    "/summary",
    response_model=PayrollSummaryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_payroll_summary(
    db: DbSession,
    actor: AdminActor,
    period_id: Annotated[str, Path()],
) -> PayrollSummaryResponse:
    """Get take-home pay of all employees for the period."""
    summary = await PayslipService(db).generate_payroll_summary(period_id)
    return PayrollSummaryResponse(
        period_id=summary.period_id,
        summary=[SummaryEntryResponse.model_validate(e) for e in summary.entries],
        total_payroll=summary.total_payroll,
    )
