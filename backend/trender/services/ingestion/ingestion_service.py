"""
Ingestion service

Fetches a feed and writes it into the card and count tables:
- one transaction per run, items processed sequentially in feed order
- cards are inserted once per slug; metrics only for newly created cards
- a bad item is rolled back to its savepoint and recorded as failed,
  the rest of the batch carries on
"""
import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytz
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from trender.config import settings
from trender.core.database import Database
from trender.core.exceptions import EmptyFeedError, ItemProcessingError, TransactionError, TrenderError
from trender.models import NEUTRAL_SCORE, SCORE_FIELDS
from trender.scrapers import BaseScraper, HackerNewsScraper, RawItem
from trender.services import monitoring_service
from trender.utils.buckets import BucketWindow, current_bucket_window
from trender.utils.slug import generate_slug

from .results import IngestionResult, ItemOutcome, ItemStatus
from .stores import CardStore, CountStore

logger = logging.getLogger(__name__)

# Metrics recorded per new card, in insertion order
TRACKED_METRICS = ("rank", "points", "comments")


def build_card_values(item: RawItem, scraper: BaseScraper) -> Dict[str, Any]:
    """
    Canonical card row for a feed item

    Raises:
        ItemProcessingError: the item lacks an id or a title
    """
    if not item.external_id:
        raise ItemProcessingError("Story is missing an id", external_id=None)
    if item.title is None:
        raise ItemProcessingError(f"Story {item.external_id} is missing a title", external_id=item.external_id)

    created_at = None
    if item.created_at_epoch is not None:
        created_at = datetime.fromtimestamp(item.created_at_epoch, tz=pytz.UTC).isoformat()

    metadata = {
        "hn_id": item.external_id,
        "url": item.url,
        "hn_url": item.permalink,
        "author": item.author,
        "created_at": created_at,
        "source": item.source,
        "points": item.points,
        "num_comments": item.comment_count,
        "tags": list(item.tags),
    }

    values = {
        "slug": generate_slug(item.title, item.external_id),
        "title": item.title,
        "description": f"{scraper.display_name} story by {item.author}",
        "source": item.source,
        "source_url": item.url or item.permalink,
        "category": scraper.default_category,
        "source_tags": [item.source],
        "metadata": metadata,
    }
    values.update({name: NEUTRAL_SCORE for name in SCORE_FIELDS})
    return values


def metric_values(rank: int, item: RawItem) -> List[Tuple[str, int]]:
    """(metric_name, value) pairs; rank is the 1-based feed position"""
    values = {
        "rank": rank,
        "points": item.points or 0,
        "comments": item.comment_count or 0,
    }
    return [(name, values[name]) for name in TRACKED_METRICS]


def _is_connection_error(exc: DBAPIError) -> bool:
    return exc.connection_invalidated or isinstance(exc, (OperationalError, InterfaceError))


class IngestionService:
    """Feed ingestion into time-bucketed storage"""

    def __init__(
        self,
        database: Database,
        scraper: Optional[BaseScraper] = None,
        card_store: Optional[CardStore] = None,
        count_store: Optional[CountStore] = None,
        bucket_size_minutes: Optional[int] = None,
    ):
        """
        Args:
            database: initialized Database
            scraper: feed to ingest (Hacker News front page by default)
            card_store / count_store: idempotent writers
            bucket_size_minutes: window width (defaults to BUCKET_SIZE_MINUTES)
        """
        self.database = database
        self.scraper = scraper or HackerNewsScraper()
        self.card_store = card_store or CardStore()
        self.count_store = count_store or CountStore()
        self.bucket_size_minutes = bucket_size_minutes or settings.bucket_size_minutes

    @property
    def source(self) -> str:
        return self.scraper.source

    async def run_ingestion(self, window: Optional[BucketWindow] = None) -> IngestionResult:
        """
        Execute one ingestion run

        Args:
            window: bucket to write into (defaults to the current one)

        Returns:
            IngestionResult

        Raises:
            FetchError: the feed could not be fetched
            EmptyFeedError: the feed returned no items
            TransactionError: the batch was rolled back
        """
        window = window or current_bucket_window(self.bucket_size_minutes)
        started = time.monotonic()

        logger.info(f"🚀 Starting {self.source} ingestion...")
        logger.info(f"📅 Bucket window: {window.start.isoformat()} to {window.end.isoformat()}")

        try:
            items = await self.scraper.fetch_items()
            if not items:
                raise EmptyFeedError(f"No stories fetched from {self.scraper.display_name or self.source} API")

            outcomes = await self._write_batch(items, window)
        except TrenderError as e:
            monitoring_service.record_run(self.source, "failed", time.monotonic() - started)
            logger.error(f"❌ {self.source} ingestion failed: {e}")
            raise

        result = IngestionResult(window=window, total_fetched=len(items), outcomes=outcomes)

        monitoring_service.record_run(self.source, "success", time.monotonic() - started)
        monitoring_service.record_outcomes(
            self.source,
            written=result.items_written,
            skipped=result.items_skipped,
            failed=result.items_failed,
            counts=result.metrics_written,
        )
        logger.info(
            f"✅ {self.source} ingestion completed: {result.items_written} cards upserted, "
            f"{result.metrics_written} count rows inserted, {result.items_skipped} skipped, "
            f"{result.items_failed} failed"
        )
        return result

    async def _write_batch(self, items: List[RawItem], window: BucketWindow) -> List[ItemOutcome]:
        """Process every item inside one transaction"""
        try:
            async with self.database.transaction() as session:
                outcomes = []
                for rank, item in enumerate(items, 1):
                    outcomes.append(await self._process_item(session, rank, item, window))
                return outcomes
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"❌ Ingestion transaction rolled back: {e}", exc_info=True)
            raise TransactionError(f"Ingestion transaction rolled back: {e}") from e

    async def _process_item(
        self,
        session: AsyncSession,
        rank: int,
        item: RawItem,
        window: BucketWindow,
    ) -> ItemOutcome:
        """
        Process one item in its own savepoint

        Connection-level errors propagate and abort the batch; anything else
        becomes a failed outcome.
        """
        try:
            card_values = build_card_values(item, self.scraper)
            async with session.begin_nested():
                return await self._write_item(session, rank, item, card_values, window)
        except ItemProcessingError as e:
            reason = str(e)
        except DBAPIError as e:
            if _is_connection_error(e):
                raise
            reason = str(e.orig) if e.orig is not None else str(e)
        except Exception as e:
            logger.debug(f"Unexpected error for story {item.external_id}", exc_info=True)
            reason = f"{e.__class__.__name__}: {e}"

        logger.warning(f"⚠️ Error processing story {item.external_id}: {reason}")
        return ItemOutcome(rank=rank, external_id=item.external_id, status=ItemStatus.FAILED, reason=reason)

    async def _write_item(
        self,
        session: AsyncSession,
        rank: int,
        item: RawItem,
        card_values: Dict[str, Any],
        window: BucketWindow,
    ) -> ItemOutcome:
        slug = card_values["slug"]
        card_id = await self.card_store.insert_if_absent(session, card_values)

        if card_id is None:
            logger.debug(f"Card {slug} already exists, skipping")
            return ItemOutcome(rank=rank, external_id=item.external_id, status=ItemStatus.SKIPPED, slug=slug)

        metrics_written = 0
        for metric_name, value in metric_values(rank, item):
            inserted = await self.count_store.insert_if_absent(session, {
                "card_id": card_id,
                "source": item.source,
                "metric_name": metric_name,
                "metric_value": value,
                "bucket_start": window.start,
                "bucket_end": window.end,
                "bucket_size": window.label,
            })
            if inserted:
                metrics_written += 1

        return ItemOutcome(
            rank=rank,
            external_id=item.external_id,
            status=ItemStatus.WRITTEN,
            slug=slug,
            metrics_written=metrics_written,
        )
