"""
Monitoring service

Prometheus metrics for the ingestion pipeline
"""
from typing import Tuple

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# ========== Prometheus metrics ==========

ingest_runs_total = Counter(
    'trender_ingest_runs_total',
    'Ingestion runs',
    ['source', 'status']  # status: success / failed
)

ingest_items_total = Counter(
    'trender_ingest_items_total',
    'Fetched items by outcome',
    ['source', 'outcome']  # outcome: written / skipped / failed
)

ingest_counts_total = Counter(
    'trender_ingest_counts_total',
    'Metric observations written',
    ['source']
)

ingest_duration = Histogram(
    'trender_ingest_duration_seconds',
    'Ingestion run duration (seconds)',
    ['source']
)


def record_run(source: str, status: str, duration_seconds: float) -> None:
    ingest_runs_total.labels(source=source, status=status).inc()
    ingest_duration.labels(source=source).observe(duration_seconds)


def record_outcomes(source: str, written: int, skipped: int, failed: int, counts: int) -> None:
    ingest_items_total.labels(source=source, outcome="written").inc(written)
    ingest_items_total.labels(source=source, outcome="skipped").inc(skipped)
    ingest_items_total.labels(source=source, outcome="failed").inc(failed)
    ingest_counts_total.labels(source=source).inc(counts)


def get_prometheus_metrics() -> Tuple[bytes, str]:
    """Exposition payload and its content type"""
    return generate_latest(), CONTENT_TYPE_LATEST
