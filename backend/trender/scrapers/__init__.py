# Feed scrapers
from .base import BaseScraper, RawItem
from .hackernews import HackerNewsScraper

__all__ = [
    'BaseScraper',
    'RawItem',
    'HackerNewsScraper',
]
