"""Per-service health endpoint reporting database reachability."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db.session import get_async_session

logger = logging.getLogger(__name__)


class ServiceHealth(BaseModel):
    """Liveness of one backend and of the database it owns."""

    service: str
    status: str
    database: str


async def database_reachable(db: AsyncSession) -> bool:
    try:
        await db.scalar(select(1))
    except SQLAlchemyError:
        logger.exception("Database unreachable")
        return False
    return True


def create_router(service: str) -> APIRouter:
    """
    Build the ``/health`` router for one backend.

    A backend whose database cannot be reached still answers, with status
    ``degraded``, so the gateway and orchestrators can tell the two apart.
    """
    router = APIRouter(tags=["health"])

    @router.get("/health", response_model=ServiceHealth)
    async def health(db: AsyncSession = Depends(get_async_session)) -> ServiceHealth:
        ok = await database_reachable(db)
        return ServiceHealth(
            service=service,
            status="healthy" if ok else "degraded",
            database="healthy" if ok else "unreachable",
        )

    return router
