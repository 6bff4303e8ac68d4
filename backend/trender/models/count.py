"""
Count model

Time-bucketed metric observations (the "counts" table). At most one value
per (card, source, metric, bucket); duplicate inserts are skipped.
"""
from sqlalchemy import Column, DateTime, ForeignKey, Index, Numeric, String, UniqueConstraint

from .base import Base, IdType

COUNT_UNIQUE_KEY = ("card_id", "source", "metric_name", "bucket_start", "bucket_end")


class Count(Base):
    """Metric observation for one card in one bucket"""

    __tablename__ = "counts"

    id = Column(IdType, primary_key=True, autoincrement=True, comment="Primary key")
    card_id = Column(
        IdType,
        ForeignKey("cards.id", ondelete="CASCADE"),
        nullable=False,
        comment="Card"
    )
    source = Column(String(50), nullable=False, comment="Origin feed")
    metric_name = Column(String(50), nullable=False, comment="rank|points|comments")
    metric_value = Column(Numeric, nullable=False, comment="Observed value")

    # ========== Bucket ==========
    bucket_start = Column(DateTime(timezone=True), nullable=False, comment="Window start (inclusive)")
    bucket_end = Column(DateTime(timezone=True), nullable=False, comment="Window end (exclusive)")
    bucket_size = Column(String(10), nullable=False, comment="Window width label, e.g. 15m")

    __table_args__ = (
        UniqueConstraint(*COUNT_UNIQUE_KEY, name="uq_counts_card_metric_bucket"),
        Index("idx_counts_card_metric_bucket", "card_id", "metric_name", "bucket_start"),
        {"comment": "Time-bucketed metric observations"}
    )

    def __repr__(self):
        return f"<Count(card_id={self.card_id}, metric={self.metric_name}, bucket_start={self.bucket_start})>"
