"""
Card read routes
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from trender.core import get_db
from trender.models import Card, Count
from trender.schemas.card import CardCountsResponse, CardResponse, CountPoint
from trender.schemas.common import ErrorResponse, PaginatedResponse

router = APIRouter()


@router.get("", response_model=PaginatedResponse[CardResponse])
async def list_cards(
    source: Optional[str] = Query(None, description="Filter by origin feed"),
    category: Optional[str] = Query(None, description="Filter by category"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    """
    List cards, newest first

    - **source**: origin feed (hackernews, curated, ...)
    - **category**: display category
    """
    query = select(Card)
    if source:
        query = query.where(Card.source == source)
    if category:
        query = query.where(Card.category == category)

    result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = result.scalar()

    query = query.order_by(desc(Card.created_at), desc(Card.id)).offset((page - 1) * size).limit(size)
    result = await db.execute(query)
    cards = result.scalars().all()

    return PaginatedResponse[CardResponse](
        page=page,
        size=size,
        total=total,
        items=[CardResponse.model_validate(card) for card in cards],
    )


@router.get("/{slug}/counts", response_model=CardCountsResponse, responses={404: {"model": ErrorResponse}})
async def card_counts(
    slug: str,
    metric: Optional[str] = Query(None, description="rank|points|comments"),
    db: AsyncSession = Depends(get_db)
):
    """
    Metric time series for one card, oldest bucket first
    """
    result = await db.execute(select(Card.id).where(Card.slug == slug))
    card_id = result.scalar_one_or_none()
    if card_id is None:
        raise HTTPException(status_code=404, detail=f"Card not found: {slug}")

    query = select(Count).where(Count.card_id == card_id)
    if metric:
        query = query.where(Count.metric_name == metric)
    query = query.order_by(Count.bucket_start, Count.metric_name)

    result = await db.execute(query)
    return CardCountsResponse(
        slug=slug,
        items=[CountPoint.model_validate(row) for row in result.scalars().all()],
    )
