"""Freshness + authority ranking for stories and river items."""

from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional, Sequence, TypeVar

from core import NewsFeed, NewsStory, RelatedSource


logger = logging.getLogger(__name__)

T = TypeVar("T")

AUTHORITY_BOOST = 0.15
AGE_SCALE_MINUTES = 100000.0

# Curated high-authority publishers, matched on trimmed lower-case names.
AUTHORITY_SOURCES = frozenset(
    {
        "reuters",
        "associated press",
        "ap",
        "bloomberg",
        "financial times",
        "the wall street journal",
        "wall street journal",
        "wsj",
        "the new york times",
        "new york times",
        "the washington post",
        "washington post",
        "the guardian",
        "bbc",
        "bbc news",
        "npr",
        "the economist",
        "al jazeera",
        "the verge",
        "wired",
        "arstechnica",
        "techcrunch",
    }
)

MINUTES_BY_UNIT: Dict[str, int] = {
    "minute": 1,
    "hour": 60,
    "day": 1440,
    "week": 10080,
    "month": 43200,
    "year": 525600,
}

_RELATIVE_RE = re.compile(r"(\d+)\s*(minute|hour|day|week|month|year)s?\s*ago")


def parse_relative_minutes(timestamp: Optional[str]) -> float:
    """'2 hours ago' -> 120.0; anything unrecognised -> inf."""
    match = _RELATIVE_RE.search(str(timestamp or "").strip().lower())
    if not match:
        return math.inf
    return float(int(match.group(1)) * MINUTES_BY_UNIT[match.group(2)])


def authority_boost(source: Optional[str]) -> float:
    return AUTHORITY_BOOST if str(source or "").strip().lower() in AUTHORITY_SOURCES else 0.0


def score_item(timestamp: Optional[str], source: Optional[str]) -> float:
    minutes = parse_relative_minutes(timestamp)
    boost = authority_boost(source)
    if math.isinf(minutes):
        return -boost
    return -(minutes / AGE_SCALE_MINUTES) + boost


def explain_score(timestamp: Optional[str], source: Optional[str]) -> Dict[str, object]:
    """Score components for diagnostics."""
    minutes = parse_relative_minutes(timestamp)
    return {
        "age_minutes": None if math.isinf(minutes) else minutes,
        "authority_boost": authority_boost(source),
        "score": score_item(timestamp, source),
    }


def _sort_by_scores(items: Sequence[T], scores: Sequence[float]) -> List[T]:
    # sorted() is stable, so equal scores keep generator order.
    order = sorted(range(len(items)), key=lambda idx: scores[idx], reverse=True)
    return [items[idx] for idx in order]


def rank_stories(stories: Sequence[NewsStory]) -> List[NewsStory]:
    if logger.isEnabledFor(logging.DEBUG):
        for story in stories:
            logger.debug(f"score {story.id}: {explain_score(story.timestamp, story.source)}")
    return _sort_by_scores(stories, [score_item(story.timestamp, story.source) for story in stories])


def rank_river(items: Sequence[RelatedSource], proxy_timestamps: Sequence[Optional[str]]) -> List[RelatedSource]:
    """
    Order river items, which carry no timestamp of their own.

    Item i borrows the timestamp of top story i (generator order). This
    assumes both arrays were produced in related order; an item past the end
    of the story list is scored as unknown age.
    """
    scores = [
        score_item(proxy_timestamps[idx] if idx < len(proxy_timestamps) else None, item.source)
        for idx, item in enumerate(items)
    ]
    return _sort_by_scores(items, scores)


def rank_feed(feed: NewsFeed) -> NewsFeed:
    """Return a copy of the feed with stories and river reordered; nothing added or dropped."""
    proxies = [story.timestamp for story in feed.top_stories]
    return feed.model_copy(
        update={
            "top_stories": rank_stories(feed.top_stories),
            "river_of_news": rank_river(feed.river_of_news, proxies),
        }
    )
