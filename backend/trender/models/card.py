"""
Card model

One row per trend item (the "cards" table). The slug is the identity key:
ingestion inserts with ON CONFLICT (slug) DO NOTHING, so the first write wins.
"""
from sqlalchemy import Column, DateTime, Float, Index, JSON, String, Text
from sqlalchemy.dialects.postgresql import ARRAY, JSONB

from .base import Base, IdType
from trender.utils.timezone import now_local

NEUTRAL_SCORE = 50.0

SCORE_FIELDS = (
    "velocity_score",
    "acceleration_score",
    "convergence_score",
    "search_intent_score",
    "creator_score",
    "engagement_efficiency_score",
    "geo_demo_spread_score",
)


class Card(Base):
    """Trend card"""

    __tablename__ = "cards"

    # ========== Primary key ==========
    id = Column(IdType, primary_key=True, autoincrement=True, comment="Primary key")

    # ========== Identity ==========
    slug = Column(String(255), nullable=False, unique=True, comment="Stable URL-safe identity")

    # ========== Display ==========
    title = Column(String(500), nullable=False, comment="Title")
    description = Column(Text, nullable=True, comment="Description")
    category = Column(String(100), nullable=True, index=True, comment="Display category")

    # ========== Origin ==========
    source = Column(String(50), nullable=False, index=True, comment="Origin feed (hackernews, ...)")
    source_url = Column(String(2000), nullable=True, comment="Canonical external link")

    # ========== Scores (placeholders until scoring exists) ==========
    velocity_score = Column(Float, default=NEUTRAL_SCORE, nullable=False)
    acceleration_score = Column(Float, default=NEUTRAL_SCORE, nullable=False)
    convergence_score = Column(Float, default=NEUTRAL_SCORE, nullable=False)
    search_intent_score = Column(Float, default=NEUTRAL_SCORE, nullable=False)
    creator_score = Column(Float, default=NEUTRAL_SCORE, nullable=False)
    engagement_efficiency_score = Column(Float, default=NEUTRAL_SCORE, nullable=False)
    geo_demo_spread_score = Column(Float, default=NEUTRAL_SCORE, nullable=False)

    # ========== Source payload ==========
    source_tags = Column(
        JSON().with_variant(ARRAY(String), "postgresql"),
        nullable=False,
        default=list,
        comment="Source tags"
    )
    # "metadata" is reserved on declarative classes
    meta = Column(
        "metadata",
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=dict,
        comment="Source-specific fields"
    )

    updated_at = Column(DateTime(timezone=True), default=now_local, onupdate=now_local, nullable=False)

    __table_args__ = (
        Index("idx_cards_source_created", "source", "created_at"),
        {"comment": "Trend cards"}
    )

    def __repr__(self):
        return f"<Card(id={self.id}, slug={self.slug})>"
