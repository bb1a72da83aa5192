"""Tag derivation and read-time estimate."""

from collections import Counter
from typing import Iterable, List
import math
import re

from processing import count_words, strip_html


GENERIC_TAGS = ["Technology", "Innovation", "Trends", "Analysis", "Insights"]
MAX_TAGS = 8
WORDS_PER_MINUTE = 200

_CONTENT_WORD_RE = re.compile(r"\b[a-z]{4,}\b")

STOPWORDS = frozenset(
    """
    about above after again against also among around because been before being below between
    both could does doing down during each even every from further have having here into just
    like made make many more most much must need only other over same should some such than
    that their them then there these they this those through under until very want well were
    what when where which while will with within without would your yours across
    """.split()
)


def _dedupe(tags: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for tag in tags:
        key = tag.casefold()
        if key and key not in seen:
            seen.add(key)
            result.append(tag)
    return result


def frequent_words(body: str, top_n: int = 5) -> List[str]:
    words = _CONTENT_WORD_RE.findall(strip_html(body).lower())
    counts = Counter(word for word in words if word not in STOPWORDS)
    # most_common keeps first-seen order for equal counts
    return [word.capitalize() for word, _ in counts.most_common(top_n)]


def generate_tags(topic: str, body: str, limit: int = MAX_TAGS) -> List[str]:
    topic_words = [word for word in str(topic or "").split() if len(word) > 3]
    return _dedupe(topic_words + GENERIC_TAGS + frequent_words(body))[:limit]


def estimate_read_minutes(content: str) -> int:
    return max(1, math.ceil(count_words(content) / WORDS_PER_MINUTE))
