"""
Twitter/X Trends Scraper
Trending terms for a WOEID via the v1.1 trends/place endpoint.
"""
from typing import Any, List, Optional, Tuple
import logging

from models import TrendingTopic, TrendSource
from scrapers.base import TrendScraper


logger = logging.getLogger(__name__)

TRENDS_PLACE_URL = "https://api.twitter.com/1.1/trends/place.json"

# ISO country code -> Yahoo WOEID
REGION_WOEIDS = {
    "US": 23424977,
    "GB": 23424975,
    "CA": 23424775,
    "AU": 23424748,
    "IN": 23424848,
    "DE": 23424829,
    "FR": 23424819,
    "JP": 23424856,
    "BR": 23424768,
}


class TwitterTrendsScraper(TrendScraper):
    """
    Twitter trends adapter (requires a Bearer Token).

    Hashtag trends are skipped; they rarely make usable article topics.
    """

    @property
    def name(self) -> str:
        return "Twitter Trends"

    @property
    def default_max_results(self) -> int:
        return self.settings.twitter.max_trends

    def is_configured(self) -> bool:
        twitter = self.settings.twitter
        return bool(twitter.trends_enabled and twitter.bearer_token)

    def resolve_woeid(self, region: Optional[str]) -> Tuple[int, Optional[str]]:
        """
        WOEID and region label for a country code.

        Codes without a known WOEID fall back to ``TWITTER_TRENDS_WOEID`` and
        carry no region label.
        """
        code = (region or "").strip().upper()
        if code in REGION_WOEIDS:
            return REGION_WOEIDS[code], code
        if code:
            logger.debug(f"[{self.name}] No WOEID for region '{code}', using {self.settings.twitter.trends_woeid}")
        return self.settings.twitter.trends_woeid, None

    async def _search(self, query: str, max_results: int) -> List[TrendingTopic]:
        twitter = self.settings.twitter
        woeid, region = self.resolve_woeid(query)
        payload = await self._get_json(
            TRENDS_PLACE_URL,
            params={"id": woeid},
            headers={"Authorization": f"Bearer {twitter.bearer_token}"},
        )
        return self.parse_trends(payload, region=region)[:max_results]

    @staticmethod
    def parse_trends(payload: Any, region: str = None) -> List[TrendingTopic]:
        blocks = payload if isinstance(payload, list) else [payload]
        topics: List[TrendingTopic] = []
        for block in blocks:
            if not isinstance(block, dict):
                continue
            for trend in block.get("trends") or []:
                keyword = str(trend.get("name") or "").strip()
                if not keyword or keyword.startswith("#"):
                    continue
                topics.append(
                    TrendingTopic(
                        keyword=keyword,
                        category="Social",
                        volume=int(trend.get("tweet_volume") or 0),
                        source=TrendSource.TWITTER,
                        region=region,
                    )
                )
        return topics
