"""API routes."""

from payslip_engine.api.routes.employees import router as employees_router
from payslip_engine.api.routes.health import router as health_router
from payslip_engine.api.routes.ledger import router as ledger_router
from payslip_engine.api.routes.payroll import router as payroll_router
from payslip_engine.api.routes.periods import router as periods_router

__all__ = [
    "employees_router",
    "health_router",
    "ledger_router",
    "payroll_router",
    "periods_router",
]
