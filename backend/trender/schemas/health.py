"""
Health check schemas
"""
from typing import Optional

from pydantic import BaseModel, Field


class DbHealthResponse(BaseModel):
    """Database round-trip result"""
    ok: bool = Field(..., description="Database reachable")
    now: str = Field(..., description="Server time (ISO8601)")
    version: str = Field(..., description="Server version or 'unknown'")
    error: Optional[str] = Field(None, description="Failure reason")


class HealthResponse(BaseModel):
    """Liveness"""
    status: str = Field(default="ok", description="Status")
    version: Optional[str] = Field(None, description="Application version")
    env: Optional[str] = Field(None, description="Environment")
