"""
Unsplash Scraper
Landscape stock photos for a topic.
"""
from typing import Any, List, Optional
import logging

from models import ImageItem
from scrapers.base import BaseScraper


logger = logging.getLogger(__name__)

SEARCH_PHOTOS_URL = "https://api.unsplash.com/search/photos"


class UnsplashScraper(BaseScraper[ImageItem]):
    """Unsplash photo search (requires an Access Key)."""

    @property
    def name(self) -> str:
        return "Unsplash"

    @property
    def default_max_results(self) -> int:
        return self.settings.unsplash.max_results

    def is_configured(self) -> bool:
        return bool(self.settings.unsplash.access_key)

    async def _search(self, query: str, max_results: int) -> List[ImageItem]:
        unsplash = self.settings.unsplash
        payload = await self._get_json(
            SEARCH_PHOTOS_URL,
            params={
                "query": query,
                "per_page": max_results,
                "orientation": unsplash.orientation,
            },
            headers={"Authorization": f"Client-ID {unsplash.access_key}"},
        )
        images = []
        for photo in (payload or {}).get("results") or []:
            image = self._convert(photo, query)
            if image is not None:
                images.append(image)
        return images

    def _convert(self, photo: Any, query: str) -> Optional[ImageItem]:
        urls = photo.get("urls") or {}
        url = urls.get("regular") or urls.get("full")
        if not url:
            return None
        user = photo.get("user") or {}
        photographer = user.get("name") or user.get("username")
        return ImageItem(
            url=url,
            alt_text=photo.get("alt_description") or photo.get("description") or query,
            source_name=self.name,
            attribution=f"Photo by {photographer} on Unsplash" if photographer else None,
        )
