"""
Hacker News front page scraper (Algolia search API)
"""
import logging
from typing import Any, List, Optional

from .base import BaseScraper, RawItem
from trender.config import settings
from trender.core.exceptions import FetchError

logger = logging.getLogger(__name__)

HN_ITEM_URL = "https://news.ycombinator.com/item?id={}"


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class HackerNewsScraper(BaseScraper):
    """Front page stories from hn.algolia.com"""

    display_name = "Hacker News"
    default_category = "Technology"

    def __init__(self, api_url: Optional[str] = None, **kwargs):
        super().__init__(source='hackernews', **kwargs)
        self.api_url = api_url or settings.hn_api_url

    async def fetch_items(self) -> List[RawItem]:
        """
        Fetch the front page

        Response shape:
        - hits: [{objectID, title, url?, author, points, num_comments, created_at_i, _tags}]
        """
        data = await self.fetch_json(self.api_url)

        if not isinstance(data, dict) or not isinstance(data.get('hits'), list):
            raise FetchError("HN API response is missing the 'hits' array")

        items = [self._parse_hit(hit) for hit in data['hits']]
        logger.info(f"📰 Fetched {len(items)} HN stories")
        return items

    def _parse_hit(self, hit: Any) -> RawItem:
        """Map one hit to a RawItem without rejecting it"""
        if not isinstance(hit, dict):
            return RawItem(source=self.source, external_id=None, title=None, raw={"value": hit})

        object_id = hit.get('objectID')
        external_id = str(object_id) if object_id not in (None, "") else None
        title = hit.get('title')
        tags = hit.get('_tags')

        return RawItem(
            source=self.source,
            external_id=external_id,
            title=title if isinstance(title, str) else None,
            url=hit.get('url') or None,
            permalink=HN_ITEM_URL.format(external_id) if external_id else None,
            author=hit.get('author'),
            points=_as_int(hit.get('points')),
            comment_count=_as_int(hit.get('num_comments')),
            created_at_epoch=_as_int(hit.get('created_at_i')),
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            raw=hit,
        )
