"""Core contracts and shared types for the news feed pipeline."""

from .contracts import (
    FALLBACK_TIER,
    PRIMARY_TIER,
    FeedCounts,
    FeedTier,
    NewsFeed,
    NewsStory,
    RelatedSource,
    SessionTimestamps,
    Sidebar,
    SidebarItem,
    TopicSession,
    TopicState,
)

__all__ = [
    "FALLBACK_TIER",
    "PRIMARY_TIER",
    "FeedCounts",
    "FeedTier",
    "NewsFeed",
    "NewsStory",
    "RelatedSource",
    "SessionTimestamps",
    "Sidebar",
    "SidebarItem",
    "TopicSession",
    "TopicState",
]
