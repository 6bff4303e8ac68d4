"""
Ingestion run results

Each fetched item folds into exactly one ItemOutcome; the run summary is
derived from the outcomes.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from trender.utils.buckets import BucketWindow


class ItemStatus(str, Enum):
    WRITTEN = "written"   # new card plus its metrics
    SKIPPED = "skipped"   # slug already present
    FAILED = "failed"     # malformed item or statement error


@dataclass
class ItemOutcome:
    rank: int
    external_id: Optional[str]
    status: ItemStatus
    slug: Optional[str] = None
    metrics_written: int = 0
    reason: Optional[str] = None


@dataclass
class IngestionResult:
    window: BucketWindow
    total_fetched: int
    outcomes: List[ItemOutcome] = field(default_factory=list)

    def _count(self, status: ItemStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def items_written(self) -> int:
        return self._count(ItemStatus.WRITTEN)

    @property
    def items_skipped(self) -> int:
        return self._count(ItemStatus.SKIPPED)

    @property
    def items_failed(self) -> int:
        return self._count(ItemStatus.FAILED)

    @property
    def metrics_written(self) -> int:
        return sum(outcome.metrics_written for outcome in self.outcomes)

    @property
    def window_start(self) -> datetime:
        return self.window.start

    @property
    def window_end(self) -> datetime:
        return self.window.end

    @property
    def bucket_size_minutes(self) -> int:
        return self.window.size_minutes
