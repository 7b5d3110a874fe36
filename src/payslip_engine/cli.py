"""Payslip engine command line interface.

Usage:
    python -m payslip_engine serve
    python -m payslip_engine init-db
    python -m payslip_engine run-payroll PERIOD_ID --actor ADMIN_UUID
    python -m payslip_engine summary PERIOD_ID
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.config import configure_logging, get_settings
from payslip_engine.database import create_schema, dispose_db, run_in_transaction
from payslip_engine.errors import PayslipError
from payslip_engine.identity import ActorContext, Role
from payslip_engine.services.payroll_service import PayrollService
from payslip_engine.services.payslip_service import PayslipService


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    try:
        return UUID(s)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid UUID: {s!r}")


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser."""
    parser = argparse.ArgumentParser(
        prog="python -m payslip_engine",
        description="Attendance-based payroll engine",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the HTTP API")
    subparsers.add_parser("init-db", help="Create database tables")

    run = subparsers.add_parser("run-payroll", help="Run payroll for a period")
    run.add_argument("period_id", type=parse_uuid, help="Attendance period ID")
    run.add_argument(
        "--actor",
        type=parse_uuid,
        required=True,
        help="Admin user ID recorded as the run's creator",
    )
    run.add_argument("--ip", default="127.0.0.1", help="IP address for the audit trail")

    summary = subparsers.add_parser("summary", help="Print a period's payroll summary")
    summary.add_argument("period_id", type=parse_uuid, help="Attendance period ID")

    return parser


async def _run_payroll(period_id: UUID, actor: ActorContext) -> dict[str, Any]:
    async def work(session: AsyncSession) -> dict[str, Any]:
        result = await PayrollService(session).run_payroll(period_id, actor)
        return {
            "period_id": str(period_id),
            "run_id": str(result.run.id),
            "employees": len(result.records),
            "working_days": result.working_days,
            "total_payroll": str(result.total_payroll),
        }

    try:
        return await run_in_transaction(work)
    finally:
        await dispose_db()


async def _summary(period_id: UUID) -> dict[str, Any]:
    async def work(session: AsyncSession) -> dict[str, Any]:
        view = await PayslipService(session).generate_payroll_summary(period_id)
        return {
            "period_id": str(view.period_id),
            "summary": [
                {"username": e.username, "total_pay": str(e.total_pay)}
                for e in view.entries
            ],
            "total_payroll": str(view.total_payroll),
        }

    try:
        return await run_in_transaction(work)
    finally:
        await dispose_db()


async def _init_db() -> None:
    try:
        await create_schema()
    finally:
        await dispose_db()


def serve() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "payslip_engine.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "serve":
        serve()
        return 0

    try:
        if args.command == "init-db":
            asyncio.run(_init_db())
            print("Database schema created")
        elif args.command == "run-payroll":
            actor = ActorContext(user_id=args.actor, role=Role.ADMIN, ip_address=args.ip)
            print(json.dumps(asyncio.run(_run_payroll(args.period_id, actor)), indent=2))
        elif args.command == "summary":
            print(json.dumps(asyncio.run(_summary(args.period_id)), indent=2))
    except PayslipError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
