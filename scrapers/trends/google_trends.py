"""
Google Trends Scraper
Daily trending searches from the public Trends RSS feed (no API key).
"""
from typing import List
import logging
import re

from models import TrendingTopic, TrendSource
from scrapers.base import TrendScraper, parse_xml, xml_child_text, xml_local_name


logger = logging.getLogger(__name__)

_DIGITS_RE = re.compile(r"[^0-9]")


def parse_traffic(value: str) -> int:
    """'200,000+' -> 200000; 'N/A' -> 0"""
    digits = _DIGITS_RE.sub("", str(value or ""))
    return int(digits) if digits else 0


class GoogleTrendsScraper(TrendScraper):
    """
    Google Trends adapter.

    Each RSS ``<item>`` carries the query as ``<title>``, an approximate
    traffic figure and a handful of news items; the first news source is
    used as the category label.
    """

    @property
    def name(self) -> str:
        return "Google Trends"

    @property
    def default_max_results(self) -> int:
        return self.settings.google_trends.max_results

    def is_configured(self) -> bool:
        return bool(self.settings.google_trends.enabled)

    async def _search(self, query: str, max_results: int) -> List[TrendingTopic]:
        region = (query or "US").strip().upper()
        xml_text = await self._get_text(
            self.settings.google_trends.feed_url,
            params={"geo": region},
        )
        return self.parse_feed(xml_text, region=region)[:max_results]

    @staticmethod
    def parse_feed(xml_text: str, region: str = "US") -> List[TrendingTopic]:
        root = parse_xml(xml_text, "Google Trends")
        topics: List[TrendingTopic] = []
        for node in root.iter():
            if xml_local_name(node.tag) != "item":
                continue
            keyword = xml_child_text(node, "title")
            if not keyword:
                continue

            news_titles: List[str] = []
            category = ""
            for child in node:
                if xml_local_name(child.tag) != "news_item":
                    continue
                if not category:
                    category = xml_child_text(child, "news_item_source")
                title = xml_child_text(child, "news_item_title")
                if title:
                    news_titles.append(title)

            topics.append(
                TrendingTopic(
                    keyword=keyword,
                    category=category or "General",
                    volume=parse_traffic(xml_child_text(node, "approx_traffic")),
                    source=TrendSource.GOOGLE_TRENDS,
                    related_keywords=news_titles[:5],
                    region=region,
                )
            )
        return topics
