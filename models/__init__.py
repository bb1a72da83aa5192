"""
Data Models
"""
from .schemas import (
    TrendSource,
    SourceType,
    TrendingTopic,
    ImageItem,
    SocialPostItem,
    VideoItem,
    BackgroundArticle,
    MediaBundle,
    FeatureToggles,
)

__all__ = [
    "TrendSource",
    "SourceType",
    "TrendingTopic",
    "ImageItem",
    "SocialPostItem",
    "VideoItem",
    "BackgroundArticle",
    "MediaBundle",
    "FeatureToggles",
]
