"""
Base Scraper
Abstract base for every source adapter.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar
import asyncio
import logging
import xml.etree.ElementTree as ET

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from config import get_settings
from config.settings import Settings
from models import TrendingTopic
from utils.exceptions import SourceError


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code == 429 or exc.response.status_code >= 500
    return False


_transient_retry = retry(
    retry=retry_if_exception(_is_transient),
    stop=stop_after_attempt(2),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    reraise=True,
)


def xml_local_name(tag: str) -> str:
    """Strip the ``{namespace}`` prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1]


def xml_child_text(node: ET.Element, name: str) -> str:
    for child in node:
        if xml_local_name(child.tag) == name:
            return (child.text or "").strip()
    return ""


def parse_xml(xml_text: str, source: str) -> ET.Element:
    try:
        return ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise SourceError(f"Malformed feed: {e}", source=source) from e


class BaseScraper(ABC, Generic[T]):
    """
    Source adapter base class.

    ``search`` is the public boundary: it returns a bounded list and never
    raises. Subclasses implement ``_search`` and may raise freely.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._client: Optional[httpx.AsyncClient] = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Adapter display name"""
        pass

    @property
    def default_max_results(self) -> int:
        return 10

    def is_configured(self) -> bool:
        """Override to require API keys etc."""
        return True

    async def search(self, query: str, max_results: Optional[int] = None) -> List[T]:
        """
        Query the source.

        Args:
            query: search keyword (region code for trend sources)
            max_results: upper bound on returned items

        Returns:
            Results in the source's native order, or [] on any failure
        """
        if not self.is_configured():
            logger.warning(f"[{self.name}] not configured, skipping...")
            return []

        limit = max(1, int(max_results or self.default_max_results))
        try:
            items = await self._search(query, limit)
        except Exception as e:
            self._log_error(f"Search failed for '{query}'", e)
            return []

        items = list(items or [])[:limit]
        self._log_search(query, len(items))
        return items

    @abstractmethod
    async def _search(self, query: str, max_results: int) -> List[T]:
        pass

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            general = self.settings.general
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(general.request_timeout),
                follow_redirects=True,
                headers={"User-Agent": general.user_agent},
            )
        return self._client

    @_transient_retry
    async def _get_json(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        client = await self._get_client()
        response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.json()

    @_transient_retry
    async def _get_text(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        client = await self._get_client()
        response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        return response.text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _log_search(self, query: str, count: int):
        logger.info(f"[{self.name}] Search '{query}' returned {count} results")

    def _log_error(self, message: str, error: Exception):
        logger.error(f"[{self.name}] {message}: {error!r}")


class TrendScraper(BaseScraper[TrendingTopic]):
    """Trend-discovery adapter; the search query is a region code."""

    async def fetch_trends(self, region: str, max_results: Optional[int] = None) -> List[TrendingTopic]:
        return await self.search(region, max_results)


class RateLimitedScraper(BaseScraper[T]):
    """Adapter base that spaces outgoing requests."""

    def __init__(self, settings: Optional[Settings] = None, requests_per_second: float = 1.0):
        super().__init__(settings)
        self._rate_limit = requests_per_second
        self._last_request_time = 0.0
        self._lock = asyncio.Lock()

    async def _wait_for_rate_limit(self):
        async with self._lock:
            loop = asyncio.get_running_loop()
            min_interval = 1.0 / self._rate_limit
            elapsed = loop.time() - self._last_request_time
            if elapsed < min_interval:
                await asyncio.sleep(min_interval - elapsed)
            self._last_request_time = loop.time()
