"""
Media Scrapers
"""
from .unsplash import UnsplashScraper
from .twitter_search import TwitterSearchScraper
from .youtube import YouTubeScraper, format_duration
from .google_news import GoogleNewsScraper

__all__ = [
    "UnsplashScraper",
    "TwitterSearchScraper",
    "YouTubeScraper",
    "GoogleNewsScraper",
    "format_duration",
]
