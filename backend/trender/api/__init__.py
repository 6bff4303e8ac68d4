"""API routes"""
from fastapi import APIRouter
from .v1 import cards, health, ingest

api_router = APIRouter()

api_router.include_router(ingest.router, prefix="/ingest", tags=["ingest"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(cards.router, prefix="/cards", tags=["cards"])

__all__ = ["api_router"]
