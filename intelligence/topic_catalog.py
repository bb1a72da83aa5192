"""
Topic Catalog
Fixed topic lists per category plus a random pool, for the category and
random generation triggers.
"""
from enum import Enum
from typing import Dict, List, Optional
import random
import re


class TopicCategory(str, Enum):
    TECHNOLOGY = "Technology"
    BUSINESS = "Business"
    AI = "Artificial Intelligence"
    STARTUP = "Startup"
    SUSTAINABILITY = "Sustainability"
    HEALTH = "Health & Wellness"
    EDUCATION = "Education"
    GAMING = "Gaming"


CATEGORY_TOPICS: Dict[TopicCategory, List[str]] = {
    TopicCategory.TECHNOLOGY: [
        "Edge Computing",
        "Quantum Computing",
        "WebAssembly Beyond the Browser",
        "5G Network Slicing",
        "Passkeys and the Passwordless Web",
    ],
    TopicCategory.BUSINESS: [
        "Remote Work Productivity",
        "Supply Chain Resilience",
        "Subscription Business Models",
        "Four-Day Work Week",
        "Creator Economy Monetization",
    ],
    TopicCategory.AI: [
        "AI Code Generation",
        "Multimodal AI Models",
        "AI Agents in the Enterprise",
        "Responsible AI Governance",
        "Small Language Models",
    ],
    TopicCategory.STARTUP: [
        "Bootstrapping vs Venture Capital",
        "Startup Fundraising in a Down Market",
        "Product-Led Growth",
        "Vertical SaaS",
        "Building a Remote-First Startup",
    ],
    TopicCategory.SUSTAINABILITY: [
        "Green Hydrogen",
        "Carbon Capture Technology",
        "Circular Economy",
        "Solid-State Batteries",
        "Sustainable Data Centers",
    ],
    TopicCategory.HEALTH: [
        "Wearable Health Monitoring",
        "Telemedicine Trends",
        "Mental Health Apps",
        "Personalized Nutrition",
        "AI in Medical Imaging",
    ],
    TopicCategory.EDUCATION: [
        "AI Tutors in the Classroom",
        "Microlearning",
        "Online Degree Programs",
        "Coding Bootcamps",
        "Gamified Learning",
    ],
    TopicCategory.GAMING: [
        "Cloud Gaming",
        "Esports Industry Growth",
        "Indie Game Development",
        "Virtual Reality Gaming",
        "Procedural Content Generation",
    ],
}

RANDOM_POOL: List[str] = [topic for topics in CATEGORY_TOPICS.values() for topic in topics]

_ALIASES = {
    "ai": TopicCategory.AI,
    "artificial-intelligence": TopicCategory.AI,
    "health": TopicCategory.HEALTH,
    "health-wellness": TopicCategory.HEALTH,
    "tech": TopicCategory.TECHNOLOGY,
    "startups": TopicCategory.STARTUP,
}


def _category_key(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", str(value or "").lower()).strip("-")


def resolve_category(name: str) -> Optional[TopicCategory]:
    """Match a category by value, member name or URL-style slug; None when unknown."""
    key = _category_key(name)
    if not key:
        return None
    if key in _ALIASES:
        return _ALIASES[key]
    for category in TopicCategory:
        if key in (_category_key(category.value), _category_key(category.name)):
            return category
    return None


def topics_for(category: Optional[TopicCategory]) -> List[str]:
    if category is None:
        return list(RANDOM_POOL)
    return list(CATEGORY_TOPICS[category])


def random_topic(rng: Optional[random.Random] = None) -> str:
    return (rng or random).choice(RANDOM_POOL)


def topic_for_category(name: str, rng: Optional[random.Random] = None) -> str:
    """Pick a topic for a category; unknown categories draw from the random pool."""
    return (rng or random).choice(topics_for(resolve_category(name)))
