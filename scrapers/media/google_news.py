"""
Google News Scraper
Background reading for a topic from the News search RSS feed (no API key).
"""
from email.utils import parsedate_to_datetime
from datetime import datetime
from typing import List, Optional
import logging

from models import BackgroundArticle
from processing import strip_html, truncate
from scrapers.base import BaseScraper, parse_xml, xml_child_text, xml_local_name


logger = logging.getLogger(__name__)


def _parse_pub_date(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None


class GoogleNewsScraper(BaseScraper[BackgroundArticle]):
    """Google News RSS adapter."""

    @property
    def name(self) -> str:
        return "Google News"

    @property
    def default_max_results(self) -> int:
        return self.settings.news.max_results

    async def _search(self, query: str, max_results: int) -> List[BackgroundArticle]:
        news = self.settings.news
        language = news.language or "en-US"
        country = language.split("-")[-1].upper()
        xml_text = await self._get_text(
            news.feed_url,
            params={
                "q": query,
                "hl": language,
                "gl": country,
                "ceid": f"{country}:{language.split('-')[0]}",
            },
        )
        return self.parse_feed(xml_text)[:max_results]

    @staticmethod
    def parse_feed(xml_text: str) -> List[BackgroundArticle]:
        root = parse_xml(xml_text, "Google News")
        articles: List[BackgroundArticle] = []
        for node in root.iter():
            if xml_local_name(node.tag) != "item":
                continue
            title = xml_child_text(node, "title")
            link = xml_child_text(node, "link")
            if not title or not link:
                continue
            articles.append(
                BackgroundArticle(
                    title=title,
                    url=link,
                    excerpt=truncate(strip_html(xml_child_text(node, "description")), 300),
                    source_name=xml_child_text(node, "source"),
                    published_at=_parse_pub_date(xml_child_text(node, "pubDate")),
                )
            )
        return articles
