"""
Celery application
"""
from celery import Celery

from trender.config import settings


app = Celery(
    "trender",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=[
        "trender.tasks.ingestion_tasks",
    ]
)

app.conf.update(
    # Beat runs on the same wall clock as the buckets
    timezone=settings.bucket_timezone,
    enable_utc=True,

    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    result_expires=3600,

    # A run never needs more than one bucket
    task_time_limit=settings.ingest_schedule_minutes * 60,
    task_soft_time_limit=max(settings.ingest_schedule_minutes * 60 - 60, 30),

    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    beat_schedule={
        "ingest-hackernews": {
            "task": "trender.tasks.ingestion_tasks.scheduled_ingestion",
            "schedule": settings.ingest_schedule_minutes * 60.0,
        },
    }
)


if __name__ == "__main__":
    app.start()
