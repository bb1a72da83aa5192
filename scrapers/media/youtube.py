"""
YouTube Scraper
Video search through the YouTube Data API v3.
"""
from typing import Any, Dict, List
import logging
import re

from models import VideoItem
from scrapers.base import BaseScraper


logger = logging.getLogger(__name__)

SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"

_ISO_DURATION_RE = re.compile(
    r"^P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?$"
)


def format_duration(value: str) -> str:
    """
    ISO-8601 duration to a clock label.

    >>> format_duration("PT4M13S")
    '4:13'
    >>> format_duration("PT1H2M3S")
    '1:02:03'
    """
    match = _ISO_DURATION_RE.match(str(value or "").strip())
    if not match:
        return "Unknown"
    parts = {key: int(val or 0) for key, val in match.groupdict().items()}
    hours = parts["days"] * 24 + parts["hours"]
    if hours:
        return f"{hours}:{parts['minutes']:02d}:{parts['seconds']:02d}"
    return f"{parts['minutes']}:{parts['seconds']:02d}"


class YouTubeScraper(BaseScraper[VideoItem]):
    """
    YouTube adapter (requires an API key).

    A second ``videos`` call fills in duration and view count; when it
    fails the search hits are returned with those fields left at defaults.
    """

    @property
    def name(self) -> str:
        return "YouTube"

    @property
    def default_max_results(self) -> int:
        return self.settings.youtube.max_results

    def is_configured(self) -> bool:
        return bool(self.settings.youtube.api_key)

    async def _search(self, query: str, max_results: int) -> List[VideoItem]:
        api_key = self.settings.youtube.api_key
        payload = await self._get_json(
            SEARCH_URL,
            params={
                "part": "snippet",
                "q": query,
                "type": "video",
                "maxResults": max_results,
                "order": "relevance",
                "key": api_key,
            },
        )
        videos = self.parse_search(payload)
        if not videos:
            return []

        try:
            details = await self._get_json(
                VIDEOS_URL,
                params={
                    "part": "contentDetails,statistics",
                    "id": ",".join(video.id for video in videos),
                    "key": api_key,
                },
            )
        except Exception as e:
            self._log_error("Video details lookup failed", e)
            return videos

        return self.merge_details(videos, details)

    @staticmethod
    def parse_search(payload: Any) -> List[VideoItem]:
        videos: List[VideoItem] = []
        for item in (payload or {}).get("items") or []:
            video_id = ((item.get("id") or {}).get("videoId") or "").strip()
            if not video_id:
                continue
            snippet = item.get("snippet") or {}
            thumbnails = snippet.get("thumbnails") or {}
            thumb = thumbnails.get("high") or thumbnails.get("medium") or thumbnails.get("default") or {}
            videos.append(
                VideoItem(
                    id=video_id,
                    title=snippet.get("title") or "",
                    url=f"https://www.youtube.com/watch?v={video_id}",
                    thumbnail_url=thumb.get("url") or "",
                )
            )
        return videos

    @staticmethod
    def merge_details(videos: List[VideoItem], payload: Any) -> List[VideoItem]:
        by_id: Dict[str, Dict[str, Any]] = {}
        for item in (payload or {}).get("items") or []:
            by_id[str(item.get("id"))] = item

        merged: List[VideoItem] = []
        for video in videos:
            detail = by_id.get(video.id)
            if not detail:
                merged.append(video)
                continue
            merged.append(
                video.model_copy(
                    update={
                        "duration_label": format_duration((detail.get("contentDetails") or {}).get("duration")),
                        "view_count": int((detail.get("statistics") or {}).get("viewCount") or 0),
                    }
                )
            )
        return merged
