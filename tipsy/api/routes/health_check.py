import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from tipsy.adapter.database import ping
from tipsy.depends import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Liveness plus a database round trip; not rate limited"""
    try:
        await ping(session)
    except SQLAlchemyError as e:
        logger.error(f"Health check database ping failed: {e.__class__.__name__}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "database": "disconnected"},
        )
    return {"status": "ok", "database": "connected"}
