"""Trender backend: trend cards and time-bucketed feed ingestion."""

__version__ = "0.1.0"
