"""
Pytest configuration and in-memory doubles for the storage layer and feed.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from itertools import count
from typing import Any, Dict, List, Optional

import pytest
import pytz

from trender.core import FetchError
from trender.scrapers import BaseScraper, HackerNewsScraper, RawItem
from trender.utils.buckets import BucketWindow, align_to_bucket


class FakeSession:
    """
    Stages writes in a journal; the owning FakeDatabase applies the journal
    on commit. Savepoints truncate the journal on error.
    """

    def __init__(self):
        self.journal: List[tuple] = []
        self.savepoints = 0

    def stage(self, target: Dict, key, value) -> None:
        self.journal.append((target, key, value))

    def staged(self, target: Dict, key) -> bool:
        return any(t is target and k == key for t, k, _ in self.journal)

    @asynccontextmanager
    async def begin_nested(self):
        self.savepoints += 1
        mark = len(self.journal)
        try:
            yield self
        except BaseException:
            del self.journal[mark:]
            raise


class FakeDatabase:
    """Transaction semantics without a server"""

    def __init__(self, healthy: bool = True):
        self.healthy = healthy
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def transaction(self):
        session = FakeSession()
        try:
            yield session
        except BaseException:
            self.rollbacks += 1
            raise
        for target, key, value in session.journal:
            target[key] = value
        self.commits += 1

    async def health_check(self) -> Dict[str, Any]:
        now = datetime.now(pytz.UTC).isoformat()
        if self.healthy:
            return {"ok": True, "now": now, "version": "PostgreSQL 16.2"}
        return {"ok": False, "now": now, "version": "unknown", "error": "connection refused"}


class FakeCardStore:
    """Cards keyed by slug; errors maps slug -> exception to raise"""

    def __init__(self, errors: Optional[Dict[str, Exception]] = None):
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.errors = errors or {}
        self._ids = count(1)

    async def insert_if_absent(self, session: FakeSession, values: Dict[str, Any]) -> Optional[int]:
        slug = values["slug"]
        if slug in self.errors:
            raise self.errors[slug]
        if slug in self.rows or session.staged(self.rows, slug):
            return None
        card_id = next(self._ids)
        session.stage(self.rows, slug, dict(values, id=card_id))
        return card_id

    def by_id(self, card_id: int) -> Dict[str, Any]:
        return next(row for row in self.rows.values() if row["id"] == card_id)


class FakeCountStore:
    """Counts keyed by (card_id, source, metric_name, bucket_start, bucket_end)"""

    def __init__(self, errors: Optional[Dict[tuple, Exception]] = None):
        self.rows: Dict[tuple, Dict[str, Any]] = {}
        # (card_id, metric_name) -> exception
        self.errors = errors or {}

    async def insert_if_absent(self, session: FakeSession, values: Dict[str, Any]) -> bool:
        error = self.errors.get((values["card_id"], values["metric_name"]))
        if error is not None:
            raise error
        key = (
            values["card_id"],
            values["source"],
            values["metric_name"],
            values["bucket_start"],
            values["bucket_end"],
        )
        if key in self.rows or session.staged(self.rows, key):
            return False
        session.stage(self.rows, key, dict(values))
        return True


class FakeScraper(BaseScraper):
    """Serves a fixed list of items (or raises a fixed error)"""

    display_name = "Hacker News"
    default_category = "Technology"

    def __init__(self, items: Optional[List[RawItem]] = None, error: Optional[Exception] = None):
        super().__init__(source="hackernews")
        self.items = items or []
        self.error = error
        self.calls = 0

    async def fetch_items(self) -> List[RawItem]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.items)


def make_hit(object_id, title="Story", **overrides) -> Dict[str, Any]:
    hit = {
        "objectID": str(object_id),
        "title": title,
        "url": f"https://example.com/{object_id}",
        "author": "pg",
        "points": 100,
        "num_comments": 10,
        "created_at_i": 1700000000,
        "_tags": ["story", f"story_{object_id}", "front_page"],
    }
    hit.update(overrides)
    return hit


def make_item(object_id, title="Story", **overrides) -> RawItem:
    """RawItem exactly as the Hacker News scraper would produce it"""
    return HackerNewsScraper()._parse_hit(make_hit(object_id, title, **overrides))


@pytest.fixture
def window() -> BucketWindow:
    return align_to_bucket(datetime(2025, 1, 1, 12, 20, 5, tzinfo=pytz.UTC), 15, "UTC")


@pytest.fixture
def fake_database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def card_store() -> FakeCardStore:
    return FakeCardStore()


@pytest.fixture
def count_store() -> FakeCountStore:
    return FakeCountStore()


@pytest.fixture
def front_page() -> List[RawItem]:
    return [
        make_item(101, "Show HN: A tiny database", points=250, num_comments=80),
        make_item(102, "Why we moved off Kubernetes", points=180, num_comments=120),
        make_item(103, "The history of the QWERTY keyboard", points=90, num_comments=30),
    ]


@pytest.fixture
def fetch_error() -> FetchError:
    return FetchError("HN API responded with status: 503")
