"""
Base scraper

Shared HTTP plumbing for feed scrapers. A fetch is all-or-nothing: any
transport failure, non-2xx status or undecodable body raises FetchError.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from trender.config import settings
from trender.core.exceptions import FetchError

logger = logging.getLogger(__name__)


@dataclass
class RawItem:
    """
    One item as delivered by a feed

    Required fields are not validated here; the ingestion service rejects
    malformed items one at a time.
    """

    source: str
    external_id: Optional[str]
    title: Optional[str]
    url: Optional[str] = None
    permalink: Optional[str] = None
    author: Optional[str] = None
    points: Optional[int] = None
    comment_count: Optional[int] = None
    created_at_epoch: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


class BaseScraper(ABC):
    """Base class for feed scrapers"""

    # Used in card descriptions, e.g. "Hacker News story by pg"
    display_name: str = ""
    default_category: str = ""

    def __init__(
        self,
        source: str,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.source = source
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self.max_attempts = max_attempts or settings.fetch_max_attempts
        self.transport = transport
        # Always ask for fresh data
        self.headers = {
            'User-Agent': settings.hn_user_agent,
            'Accept': 'application/json',
            'Cache-Control': 'no-cache',
            'Pragma': 'no-cache',
        }

    @abstractmethod
    async def fetch_items(self) -> List[RawItem]:
        """
        Fetch the current batch of items

        Returns:
            items in feed delivery order

        Raises:
            FetchError: transport or response shape failure
        """

    async def _make_request(self, url: str, method: str = 'GET', **kwargs) -> httpx.Response:
        """
        Issue one HTTP request under the configured retry policy

        With FETCH_MAX_ATTEMPTS=1 (the default) this is a single call.
        Only transport errors and 5xx responses are retried.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                async with httpx.AsyncClient(
                    timeout=self.timeout,
                    follow_redirects=True,
                    transport=self.transport,
                ) as client:
                    response = await client.request(method, url, headers=self.headers, **kwargs)
                    response.raise_for_status()
                    return response

    async def fetch_json(self, url: str, **kwargs) -> Any:
        """GET a URL and decode its JSON body, mapping every failure to FetchError"""
        try:
            response = await self._make_request(url, **kwargs)
        except httpx.HTTPStatusError as e:
            raise FetchError(f"{self.display_name or self.source} API responded with status: {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Failed to reach {self.display_name or self.source} API: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"{self.display_name or self.source} API returned a malformed JSON body") from e
