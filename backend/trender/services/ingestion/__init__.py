"""Feed ingestion"""
from .ingestion_service import IngestionService, build_card_values, metric_values, TRACKED_METRICS
from .results import IngestionResult, ItemOutcome, ItemStatus
from .stores import CardStore, CountStore, build_insert_ignore

__all__ = [
    "IngestionService",
    "IngestionResult",
    "ItemOutcome",
    "ItemStatus",
    "CardStore",
    "CountStore",
    "build_insert_ignore",
    "build_card_values",
    "metric_values",
    "TRACKED_METRICS",
]
