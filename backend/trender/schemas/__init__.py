"""Pydantic schemas"""
from .card import CardCountsResponse, CardResponse, CountPoint
from .common import ErrorResponse, PaginatedResponse
from .health import DbHealthResponse, HealthResponse
from .ingest import BucketInfo, IngestErrorResponse, IngestRunResponse, IngestStatusResponse

__all__ = [
    # Common
    "ErrorResponse",
    "PaginatedResponse",
    # Health
    "DbHealthResponse",
    "HealthResponse",
    # Ingest
    "BucketInfo",
    "IngestRunResponse",
    "IngestErrorResponse",
    "IngestStatusResponse",
    # Cards
    "CardResponse",
    "CountPoint",
    "CardCountsResponse",
]
