"""
Ingestion API schemas

Field names are serialized in camelCase (by_alias=True).
"""
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class IngestRunResponse(BaseModel):
    """Successful ingestion run"""
    ok: bool = Field(default=True, description="Run succeeded")
    items_written: int = Field(..., alias="itemsWritten", description="New cards")
    metrics_written: int = Field(..., alias="metricsWritten", description="New count rows")
    window_start: datetime = Field(..., alias="windowStart", description="Bucket start")
    window_end: datetime = Field(..., alias="windowEnd", description="Bucket end")
    total_fetched: int = Field(..., alias="totalFetched", description="Items returned by the feed")
    bucket_size_minutes: int = Field(..., alias="bucketSizeMinutes", description="Bucket width")
    items_skipped: int = Field(default=0, alias="itemsSkipped", description="Items whose card already existed")
    items_failed: int = Field(default=0, alias="itemsFailed", description="Items rejected individually")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "ok": True,
                "itemsWritten": 30,
                "metricsWritten": 90,
                "windowStart": "2025-01-01T12:15:00+00:00",
                "windowEnd": "2025-01-01T12:30:00+00:00",
                "totalFetched": 30,
                "bucketSizeMinutes": 15,
                "itemsSkipped": 0,
                "itemsFailed": 0
            }
        }


class IngestErrorResponse(BaseModel):
    """Failed ingestion run"""
    ok: bool = Field(default=False, description="Run succeeded")
    error: str = Field(..., description="Human-readable error")
    items_written: int = Field(default=0, alias="itemsWritten")
    metrics_written: int = Field(default=0, alias="metricsWritten")
    window_start: datetime = Field(..., alias="windowStart")
    window_end: datetime = Field(..., alias="windowEnd")

    class Config:
        populate_by_name = True


class BucketInfo(BaseModel):
    start: datetime
    end: datetime
    size_minutes: int = Field(..., alias="sizeMinutes")

    class Config:
        populate_by_name = True


class IngestStatusResponse(BaseModel):
    """Trigger endpoint description"""
    ok: bool = True
    message: str
    current_bucket: BucketInfo = Field(..., alias="currentBucket")
    usage: Dict[str, object]

    class Config:
        populate_by_name = True
