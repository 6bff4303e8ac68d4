"""
Ingestion Celery tasks
"""
import asyncio
import logging
from typing import Any, Dict

from celery import shared_task

from trender.core import ConfigError, Database, TrenderError
from trender.services.ingestion import IngestionService

logger = logging.getLogger(__name__)


@shared_task(name="trender.tasks.ingestion_tasks.scheduled_ingestion")
def scheduled_ingestion() -> Dict[str, Any]:
    """
    Scheduled ingestion, every INGEST_SCHEDULE_MINUTES

    Runs on a fresh event loop with its own connection pool so nothing is
    shared with a previous loop.
    """
    logger.info("🚀 Starting scheduled ingestion...")

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        result = loop.run_until_complete(run_ingestion_async())
    finally:
        loop.close()

    logger.info(f"✅ Scheduled ingestion finished: {result}")
    return result


async def run_ingestion_async() -> Dict[str, Any]:
    """
    Run one ingestion and summarize it as a JSON-friendly dict

    Domain failures are reported in the result; retry policy belongs to
    the scheduler.
    """
    try:
        database = Database().init()
    except ConfigError as e:
        logger.error(f"❌ Cannot start ingestion: {e}")
        return {"status": "failed", "error": str(e), "items_written": 0, "metrics_written": 0}

    try:
        service = IngestionService(database)
        try:
            result = await service.run_ingestion()
        except TrenderError as e:
            return {"status": "failed", "error": str(e), "items_written": 0, "metrics_written": 0}

        return {
            "status": "success",
            "items_written": result.items_written,
            "metrics_written": result.metrics_written,
            "items_skipped": result.items_skipped,
            "items_failed": result.items_failed,
            "total_fetched": result.total_fetched,
            "window_start": result.window_start.isoformat(),
            "window_end": result.window_end.isoformat(),
        }
    finally:
        await database.shutdown()
