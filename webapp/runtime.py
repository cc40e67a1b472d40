"""Shared runtime singletons for web/CLI entrypoints."""

from __future__ import annotations

from feed.service import FeedService, get_default_service
from orchestrator.service import TopicBoard
from orchestrator.store import TopicSessionStore


_STORE = TopicSessionStore()
_BOARD = TopicBoard(store=_STORE)


def get_board() -> TopicBoard:
    return _BOARD


def get_feed_service() -> FeedService:
    return get_default_service()
