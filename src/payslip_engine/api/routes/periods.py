"""Attendance period endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payslip_engine.api.dependencies import Actor, AdminActor, DbSession
from payslip_engine.api.schemas import ErrorResponse, PeriodCreate, PeriodResponse
from payslip_engine.services.period_service import PeriodService
from payslip_engine.services.state_machine import PeriodStatus

router = APIRouter(prefix="/periods", tags=["periods"])


@router.post(
    "",
    response_model=PeriodResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_period(
    db: DbSession,
    actor: AdminActor,
    payload: PeriodCreate,
) -> PeriodResponse:
    """Create a new attendance period."""
    period = await PeriodService(db).create_period(
        payload.start_date, payload.end_date, actor
    )
    await db.commit()

    response = PeriodResponse.model_validate(period)
    response.status = PeriodStatus.OPEN.value
    return response


@router.get(
    "/{period_id}",
    response_model=PeriodResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_period(
    db: DbSession,
    actor: Actor,
    period_id: Annotated[str, Path()],
) -> PeriodResponse:
    """Get a period with its open/frozen status."""
    service = PeriodService(db)
    period = await service.find_period(period_id)

    response = PeriodResponse.model_validate(period)
    response.status = (await service.period_status(period.id)).value
    return response
