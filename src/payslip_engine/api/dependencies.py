"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from payslip_engine.database import init_db
from payslip_engine.identity import ActorContext, Role


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency.

    Routes commit explicitly; closing an uncommitted session rolls it back.
    """
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


def client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def get_actor(
    request: Request,
    x_user_id: Annotated[str | None, Header()] = None,
    x_user_role: Annotated[str | None, Header()] = None,
) -> ActorContext:
    """Build the actor from identity headers set by the auth gateway."""
    if not x_user_id or not x_user_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-ID and X-User-Role headers are required",
        )
    try:
        user_id = UUID(x_user_id)
        role = Role(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity",
        )

    return ActorContext(
        user_id=user_id,
        role=role,
        ip_address=client_ip(request),
        request_id=getattr(request.state, "request_id", None),
    )


def require_role(role: Role):
    """Dependency factory restricting a route to one role."""

    async def dependency(
        actor: Annotated[ActorContext, Depends(get_actor)],
    ) -> ActorContext:
        if actor.role != role:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Unauthorized",
            )
        return actor

    return dependency


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Actor = Annotated[ActorContext, Depends(get_actor)]
AdminActor = Annotated[ActorContext, Depends(require_role(Role.ADMIN))]
EmployeeActor = Annotated[ActorContext, Depends(require_role(Role.EMPLOYEE))]
