import logging

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardulary import __version__
from cardulary.config.database import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str = __version__


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    response: Response,
    session: AsyncSession = Depends(get_async_session),
) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API and its database are reachable.
    """
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check could not reach the database: {e}")
        response.status_code = 503
        return HealthCheckResponse(status="unhealthy", database="unavailable")
    return HealthCheckResponse(status="healthy", database="ok")
