from __future__ import annotations

import math
from collections import Counter

import pytest

from core import NewsFeed, NewsStory, RelatedSource, Sidebar
from feed.ranking import (
    AUTHORITY_SOURCES,
    explain_score,
    parse_relative_minutes,
    rank_feed,
    rank_river,
    rank_stories,
    score_item,
)


def _story(story_id: str, timestamp: str, source: str = "Some Blog") -> NewsStory:
    return NewsStory(
        id=story_id,
        title=f"Story {story_id}",
        summary="summary",
        source=source,
        url=f"https://example.com/{story_id}",
        timestamp=timestamp,
        related_sources=[],
    )


def _river(title: str, source: str = "Some Blog") -> RelatedSource:
    return RelatedSource(title=title, source=source, url=f"https://example.com/{title}")


def _feed(stories, river) -> NewsFeed:
    return NewsFeed(
        topic="t",
        top_stories=stories,
        river_of_news=river,
        sidebar=Sidebar(quick_links=[], trending_topics=["a"]),
    )


@pytest.mark.parametrize(
    "timestamp,expected",
    [
        ("5 minutes ago", 5),
        ("1 hour ago", 60),
        ("2 Hours Ago", 120),
        ("3 days ago", 3 * 1440),
        ("1 week ago", 10080),
        ("2 months ago", 2 * 43200),
        ("1 year ago", 525600),
        ("  12hours ago ", 720),
    ],
)
def test_parse_relative_minutes(timestamp: str, expected: int) -> None:
    assert parse_relative_minutes(timestamp) == expected


@pytest.mark.parametrize("timestamp", ["", None, "yesterday", "an hour ago", "2024-05-01", "in 3 days"])
def test_parse_relative_minutes_unknown_is_infinite(timestamp) -> None:
    assert math.isinf(parse_relative_minutes(timestamp))


def test_score_strictly_decreasing_in_age() -> None:
    ages = ["1 minute ago", "30 minutes ago", "2 hours ago", "1 day ago", "3 weeks ago", "1 year ago"]
    scores = [score_item(ts, "Some Blog") for ts in ages]
    assert all(a > b for a, b in zip(scores, scores[1:]))


def test_authority_outranks_same_age() -> None:
    assert score_item("4 hours ago", " Reuters ") > score_item("4 hours ago", "Some Blog")
    assert "reuters" in AUTHORITY_SOURCES
    assert len(AUTHORITY_SOURCES) >= 20


def test_authority_outweighs_modest_but_not_large_recency_gaps() -> None:
    fresh_blog = score_item("2 hours ago", "Some Blog")
    older_wire = score_item("10 hours ago", "reuters")
    assert fresh_blog == pytest.approx(-0.0012)
    assert older_wire == pytest.approx(0.144)
    assert older_wire > fresh_blog

    # a month of age costs ~0.43, more than the 0.15 boost
    assert score_item("1 month ago", "reuters") < score_item("1 day ago", "Some Blog")


def test_unknown_age_scores_negative_boost() -> None:
    assert score_item("sometime", "Some Blog") == 0.0
    assert score_item("sometime", "BBC") == pytest.approx(-0.15)
    assert explain_score("sometime", "BBC") == {"age_minutes": None, "authority_boost": 0.15, "score": -0.15}


def test_rank_stories_orders_by_score_and_is_stable() -> None:
    stories = [
        _story("old", "3 days ago"),
        _story("tie_a", "1 hour ago"),
        _story("wire", "5 hours ago", "Bloomberg"),
        _story("tie_b", "1 hour ago"),
    ]
    ranked = rank_stories(stories)
    assert [s.id for s in ranked] == ["wire", "tie_a", "tie_b", "old"]


def test_rank_river_borrows_story_timestamps_by_position() -> None:
    river = [_river("first"), _river("second"), _river("third"), _river("beyond")]
    proxies = ["2 days ago", "10 minutes ago", "5 hours ago"]

    ranked = rank_river(river, proxies)
    # "beyond" has no proxy: unknown age scores 0.0 for a non-curated source
    assert [item.title for item in ranked] == ["beyond", "second", "third", "first"]


def test_rank_feed_only_reorders() -> None:
    stories = [_story("a", "2 days ago"), _story("b", "1 hour ago"), _story("c", "unknown", "NPR")]
    river = [_river("r1"), _river("r2", "The Verge"), _river("r3"), _river("r4")]
    feed = _feed(stories, river)

    ranked = rank_feed(feed)

    assert Counter(s.id for s in ranked.top_stories) == Counter(s.id for s in feed.top_stories)
    assert Counter(r.title for r in ranked.river_of_news) == Counter(r.title for r in feed.river_of_news)
    assert ranked.sidebar == feed.sidebar
    assert ranked.topic == feed.topic
    # input feed untouched
    assert [s.id for s in feed.top_stories] == ["a", "b", "c"]
    assert [s.id for s in ranked.top_stories] == ["b", "a", "c"]


def test_rank_feed_uses_generator_order_for_river_proxies() -> None:
    stories = [_story("a", "3 days ago"), _story("b", "1 minute ago")]
    river = [_river("r1"), _river("r2")]
    ranked = rank_feed(_feed(stories, river))
    assert [r.title for r in ranked.river_of_news] == ["r2", "r1"]
