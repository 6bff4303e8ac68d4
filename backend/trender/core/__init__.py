"""Core infrastructure: database, exceptions, logging"""
from .database import Database, get_database, get_db
from .exceptions import (
    ConfigError,
    EmptyFeedError,
    FetchError,
    ItemProcessingError,
    TransactionError,
    TrenderError,
)

__all__ = [
    "Database",
    "get_database",
    "get_db",
    "TrenderError",
    "ConfigError",
    "FetchError",
    "EmptyFeedError",
    "ItemProcessingError",
    "TransactionError",
]
