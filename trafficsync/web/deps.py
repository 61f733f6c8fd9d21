"""Request-scoped access to the process runtime."""

from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.runtime import Runtime
from ..shared.db.database import session_scope


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


async def get_db_session(
    runtime: Runtime = Depends(get_runtime),
) -> AsyncGenerator[AsyncSession, None]:
    """Session for one request, committed when the handler returns."""
    async with session_scope(runtime.session_factory) as session:
        yield session


RuntimeDep = Annotated[Runtime, Depends(get_runtime)]
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
