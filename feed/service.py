"""
Feed Service
两级 tier 编排: primary -> fallback -> FetchError
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from config import get_endpoint_settings
from core import FALLBACK_TIER, PRIMARY_TIER, FeedTier, NewsFeed
from utils.exceptions import ConfigurationError, EndpointError, FetchError

from .endpoint_client import ResponsesEndpointClient
from .parser import parse_feed
from .ranking import rank_feed


logger = logging.getLogger(__name__)


class FeedService:
    """Coordinates endpoint call, parsing and ranking across the two tiers."""

    def __init__(
        self,
        client: Optional[ResponsesEndpointClient] = None,
        *,
        primary: FeedTier = PRIMARY_TIER,
        fallback: FeedTier = FALLBACK_TIER,
        primary_deadline_s: Optional[float] = None,
        fallback_deadline_s: Optional[float] = None,
    ) -> None:
        settings = get_endpoint_settings()
        self.client = client or ResponsesEndpointClient()
        self.primary = primary
        self.fallback = fallback
        self.primary_deadline_s = float(
            primary_deadline_s if primary_deadline_s is not None else settings.primary_deadline_s
        )
        self.fallback_deadline_s = float(
            fallback_deadline_s if fallback_deadline_s is not None else settings.fallback_deadline_s
        )

    async def fetch_feed(self, topic: str) -> NewsFeed:
        """
        Fetch, parse and rank a feed for one topic.

        Any tier-1 failure triggers exactly one tier-2 attempt. A tier-2
        failure raises FetchError carrying the tier-2 cause. Missing
        credentials raise ConfigurationError before any attempt, and
        cancellation propagates without a fallback.
        """
        topic = str(topic or "").strip()
        if not topic:
            raise ValueError("topic is required")

        self.client.ensure_configured()

        try:
            return await self._attempt(topic, self.primary, self.primary_deadline_s)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning(f"[{self.primary.name}] feed for '{topic}' failed, falling back: {exc}")

        try:
            return await self._attempt(topic, self.fallback, self.fallback_deadline_s)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.error(f"[{self.fallback.name}] feed for '{topic}' failed: {exc}")
            raise FetchError(
                f"Could not fetch news for '{topic}'",
                cause=exc,
                tier=self.fallback.name,
            ) from exc

    async def _attempt(self, topic: str, tier: FeedTier, deadline_s: float) -> NewsFeed:
        started = time.monotonic()
        try:
            raw_text = await asyncio.wait_for(
                self.client.request(topic, tier.counts, tier.max_output_tokens),
                timeout=deadline_s,
            )
        except asyncio.TimeoutError as exc:
            raise EndpointError(f"Tier '{tier.name}' exceeded its {deadline_s}s deadline") from exc

        feed = rank_feed(parse_feed(raw_text))
        logger.info(
            f"[{tier.name}] '{topic}': {len(feed.top_stories)} stories, "
            f"{len(feed.river_of_news)} river items in {time.monotonic() - started:.1f}s"
        )
        return feed


_DEFAULT_SERVICE: Optional[FeedService] = None


def get_default_service() -> FeedService:
    global _DEFAULT_SERVICE
    if _DEFAULT_SERVICE is None:
        _DEFAULT_SERVICE = FeedService()
    return _DEFAULT_SERVICE


async def fetch_feed(topic: str) -> NewsFeed:
    """Top-level entry point used by the board, API and CLI."""
    return await get_default_service().fetch_feed(topic)
