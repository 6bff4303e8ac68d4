"""
Card schemas
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class CardResponse(BaseModel):
    """Trend card"""
    id: int = Field(..., description="Card ID")
    slug: str = Field(..., description="Stable identifier")
    title: str = Field(..., description="Title")
    description: Optional[str] = Field(None, description="Description")
    category: Optional[str] = Field(None, description="Category")
    source: str = Field(..., description="Origin feed")
    source_url: Optional[str] = Field(None, description="External link")
    velocity_score: float
    acceleration_score: float
    convergence_score: float
    search_intent_score: float
    creator_score: float
    engagement_efficiency_score: float
    geo_demo_spread_score: float
    source_tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta")
    created_at: datetime

    class Config:
        from_attributes = True


class CountPoint(BaseModel):
    """One metric observation"""
    metric_name: str
    metric_value: Decimal
    bucket_start: datetime
    bucket_end: datetime
    bucket_size: str

    class Config:
        from_attributes = True


class CardCountsResponse(BaseModel):
    """Time series for one card"""
    slug: str
    items: List[CountPoint]
