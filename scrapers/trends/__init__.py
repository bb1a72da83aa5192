"""
Trend Scrapers
"""
from .google_trends import GoogleTrendsScraper, parse_traffic
from .twitter_trends import TwitterTrendsScraper

__all__ = [
    "GoogleTrendsScraper",
    "TwitterTrendsScraper",
    "parse_traffic",
]
