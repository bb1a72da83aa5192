"""
Twitter/X Search Scraper
Recent posts about a topic via the API v2 recent-search endpoint.
"""
from typing import Any, Dict, List
import logging

from models import SocialPostItem
from scrapers.base import RateLimitedScraper


logger = logging.getLogger(__name__)

RECENT_SEARCH_URL = "https://api.twitter.com/2/tweets/search/recent"


class TwitterSearchScraper(RateLimitedScraper[SocialPostItem]):
    """
    Twitter/X recent-search adapter.
    Uses the API v2 with a Bearer Token; retweets are excluded.
    """

    def __init__(self, settings=None):
        # the search endpoint is tightly rate limited
        super().__init__(settings, requests_per_second=0.5)

    @property
    def name(self) -> str:
        return "Twitter/X"

    @property
    def default_max_results(self) -> int:
        return self.settings.twitter.max_results

    def is_configured(self) -> bool:
        return bool(self.settings.twitter.bearer_token)

    async def _search(self, query: str, max_results: int) -> List[SocialPostItem]:
        await self._wait_for_rate_limit()
        payload = await self._get_json(
            RECENT_SEARCH_URL,
            params={
                "query": f"{query} -is:retweet lang:en",
                # the endpoint accepts 10..100
                "max_results": min(max(max_results, 10), 100),
                "tweet.fields": "created_at,public_metrics,author_id",
                "user.fields": "username,name",
                "expansions": "author_id",
            },
            headers={"Authorization": f"Bearer {self.settings.twitter.bearer_token}"},
        )
        return self.parse_response(payload)[:max_results]

    @staticmethod
    def parse_response(payload: Any) -> List[SocialPostItem]:
        payload = payload or {}
        users: Dict[str, Dict[str, Any]] = {}
        for user in (payload.get("includes") or {}).get("users") or []:
            users[str(user.get("id"))] = user

        posts: List[SocialPostItem] = []
        for tweet in payload.get("data") or []:
            tweet_id = str(tweet.get("id") or "")
            if not tweet_id:
                continue
            user = users.get(str(tweet.get("author_id")), {})
            username = user.get("username")
            metrics = tweet.get("public_metrics") or {}
            posts.append(
                SocialPostItem(
                    id=tweet_id,
                    text=tweet.get("text") or "",
                    author_name=user.get("name") or "Unknown",
                    permalink=f"https://twitter.com/{username}/status/{tweet_id}" if username else "",
                    engagement_score=int(metrics.get("like_count") or 0),
                )
            )
        return posts
