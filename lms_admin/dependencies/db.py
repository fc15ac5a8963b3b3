from typing import Any, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession
from lms_admin.db.session import get_db


async def get_database() -> AsyncGenerator[AsyncSession | Any, Any]:
    """
    Dependency injecting the request-scoped database session into endpoints
    """
    async for session in get_db():
        yield session
