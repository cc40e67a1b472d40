"""Canonical data contracts for topic news feeds."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _WireModel(BaseModel):
    """Frozen model that reads and writes camelCase wire names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class RelatedSource(_WireModel):
    """Secondary citation; also the shape of river-of-news items."""

    title: str
    source: str
    url: str
    snippet: Optional[str] = None


class NewsStory(_WireModel):
    """Featured story with its supporting coverage."""

    id: str
    title: str
    summary: str
    source: str
    url: str
    timestamp: Optional[str] = None
    related_sources: List[RelatedSource] = Field(alias="relatedSources")


class SidebarItem(_WireModel):
    """Deep-link reference shown next to the feed."""

    title: str
    url: str
    source: str


class Sidebar(_WireModel):
    quick_links: List[SidebarItem] = Field(alias="quickLinks")
    trending_topics: List[str] = Field(alias="trendingTopics")


class NewsFeed(_WireModel):
    """Structured feed for one topic, produced atomically per request."""

    topic: str
    top_stories: List[NewsStory] = Field(alias="topStories")
    river_of_news: List[RelatedSource] = Field(alias="riverOfNews")
    sidebar: Sidebar

    def to_wire(self) -> dict:
        """JSON-ready dict using the wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)


class FeedCounts(BaseModel):
    """Requested item counts per feed section."""

    model_config = ConfigDict(frozen=True)

    top_stories: int
    river_of_news: int
    quick_links: int
    trending_topics: int


class FeedTier(BaseModel):
    """One complete attempt configuration: item counts plus output budget."""

    model_config = ConfigDict(frozen=True)

    name: str
    counts: FeedCounts
    max_output_tokens: int


PRIMARY_TIER = FeedTier(
    name="primary",
    counts=FeedCounts(top_stories=6, river_of_news=12, quick_links=7, trending_topics=5),
    max_output_tokens=4000,
)

FALLBACK_TIER = FeedTier(
    name="fallback",
    counts=FeedCounts(top_stories=5, river_of_news=10, quick_links=6, trending_topics=4),
    max_output_tokens=2200,
)


class TopicState(str, Enum):
    """Lifecycle of a topic session on the board."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class SessionTimestamps(BaseModel):
    """Lifecycle timestamps for a topic session."""

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class TopicSession(BaseModel):
    """Observable per-topic state: Idle, Loading, Ready(feed) or Failed(error)."""

    session_id: str
    topic: str
    state: TopicState = TopicState.IDLE
    feed: Optional[NewsFeed] = None
    error: Optional[str] = None
    attempts: int = 0
    timestamps: SessionTimestamps = Field(default_factory=SessionTimestamps)

    @field_validator("topic", mode="before")
    @classmethod
    def _non_empty_topic(cls, value: object) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("topic is required")
        return text

    def to_wire(self) -> dict:
        payload = self.model_dump(mode="json", exclude={"feed"})
        payload["feed"] = self.feed.to_wire() if self.feed else None
        return payload
