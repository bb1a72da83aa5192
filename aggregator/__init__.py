"""
Aggregator Module
"""
from .topic_aggregator import TopicAggregator, merge_topics, rank_key
from .media_collector import MediaCollector

__all__ = [
    "TopicAggregator",
    "MediaCollector",
    "merge_topics",
    "rank_key",
]
