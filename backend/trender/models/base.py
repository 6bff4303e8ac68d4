"""
Declarative base for database models
"""
from sqlalchemy import BigInteger, Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

from trender.utils.timezone import now_local

# SQLite only autoincrements an INTEGER PRIMARY KEY (rowid alias)
IdType = BigInteger().with_variant(Integer, "sqlite")


class BaseModel:
    """Common columns for every model"""

    created_at = Column(DateTime(timezone=True), default=now_local, nullable=False, comment="Creation time")


Base = declarative_base(cls=BaseModel)
