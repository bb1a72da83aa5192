"""
Scrapers Module
"""
from .base import BaseScraper, RateLimitedScraper, TrendScraper
from .trends import GoogleTrendsScraper, TwitterTrendsScraper
from .media import (
    GoogleNewsScraper,
    TwitterSearchScraper,
    UnsplashScraper,
    YouTubeScraper,
)

__all__ = [
    # Base
    "BaseScraper",
    "RateLimitedScraper",
    "TrendScraper",
    # Trends
    "GoogleTrendsScraper",
    "TwitterTrendsScraper",
    # Media
    "UnsplashScraper",
    "TwitterSearchScraper",
    "YouTubeScraper",
    "GoogleNewsScraper",
]
