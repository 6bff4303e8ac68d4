"""
Ingestion API routes
"""
import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from trender.config import settings
from trender.core import Database, TrenderError, get_database
from trender.schemas.ingest import BucketInfo, IngestErrorResponse, IngestRunResponse, IngestStatusResponse
from trender.services.ingestion import IngestionService
from trender.utils.buckets import BucketWindow, current_bucket_window

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service_factory() -> Callable[[Database], IngestionService]:
    """
    Ingestion service factory dependency (Hacker News front page)

    The route resolves the database itself, inside its error handling.
    """
    return IngestionService


def _error_response(error: str, window: BucketWindow) -> JSONResponse:
    body = IngestErrorResponse(error=error, window_start=window.start, window_end=window.end)
    return JSONResponse(content=body.model_dump(by_alias=True, mode="json"), status_code=500)


@router.post(
    "",
    response_model=IngestRunResponse,
    responses={500: {"model": IngestErrorResponse}},
)
async def trigger_ingestion(
    request: Request,
    make_service: Callable[[Database], IngestionService] = Depends(get_service_factory),
):
    """
    Run one ingestion

    Fetches the feed and writes new cards plus their metrics for the
    current bucket. Failures return ok=false with zero counts.
    """
    window = current_bucket_window()

    try:
        service = make_service(get_database(request))
        result = await service.run_ingestion(window=window)
    except TrenderError as e:
        return _error_response(str(e), window)
    except Exception as e:
        logger.error(f"❌ Unexpected ingestion error: {e}", exc_info=True)
        return _error_response(str(e) or "Unknown error occurred", window)

    body = IngestRunResponse(
        items_written=result.items_written,
        metrics_written=result.metrics_written,
        window_start=result.window_start,
        window_end=result.window_end,
        total_fetched=result.total_fetched,
        bucket_size_minutes=result.bucket_size_minutes,
        items_skipped=result.items_skipped,
        items_failed=result.items_failed,
    )
    return JSONResponse(content=body.model_dump(by_alias=True, mode="json"))


@router.get("", response_model=IngestStatusResponse)
async def ingestion_status():
    """
    Current bucket and trigger contract; no side effects
    """
    window = current_bucket_window()
    body = IngestStatusResponse(
        message="HN ingestion endpoint is ready",
        current_bucket=BucketInfo(start=window.start, end=window.end, size_minutes=settings.bucket_size_minutes),
        usage={
            "method": "POST",
            "description": "Trigger HN front page ingestion",
            "response": {
                "ok": "boolean",
                "itemsWritten": "number",
                "metricsWritten": "number",
                "windowStart": "string (ISO)",
                "windowEnd": "string (ISO)",
                "totalFetched": "number",
                "bucketSizeMinutes": "number",
            },
        },
    )
    return JSONResponse(content=body.model_dump(by_alias=True, mode="json"))
