"""
Health check routes
"""
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from trender.core import get_database
from trender.schemas.health import DbHealthResponse
from trender.utils.timezone import now_local

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/db", response_model=DbHealthResponse, responses={503: {"model": DbHealthResponse}})
async def database_health(request: Request):
    """
    Database round trip

    200 when the server answers, 503 otherwise
    """
    try:
        health = await get_database(request).health_check()
    except Exception as e:
        logger.error(f"❌ Database health check failed: {e}")
        health = {
            "ok": False,
            "now": now_local().isoformat(),
            "version": "unknown",
            "error": str(e) or "Unknown error",
        }

    body = DbHealthResponse(**health)
    return JSONResponse(
        content=body.model_dump(exclude_none=True),
        status_code=200 if body.ok else 503,
    )
