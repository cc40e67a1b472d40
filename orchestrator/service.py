"""Topic board: per-topic load/refresh/close lifecycle on top of the feed service."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from config import get_general_settings
from core import TopicSession, TopicState
from feed.service import FeedService, get_default_service
from utils.exceptions import NewsFeedError

from .store import TopicSessionStore


logger = logging.getLogger(__name__)


class TopicBoard:
    """
    Owns topic sessions and the asyncio tasks that load them.

    Session state moves only on the feed service result: Loading on start,
    Ready with the ranked feed on success, Failed with the error otherwise.
    Closing a session cancels its in-flight load; no fallback runs after
    a cancellation.
    """

    def __init__(
        self,
        *,
        store: Optional[TopicSessionStore] = None,
        service: Optional[FeedService] = None,
    ) -> None:
        self._store = store or TopicSessionStore()
        self._service = service
        self._tasks: Dict[str, asyncio.Task] = {}

    @property
    def service(self) -> FeedService:
        return self._service or get_default_service()

    async def open_topic(self, topic: str, *, wait: bool = False) -> TopicSession:
        """Open a tab for the topic, or focus the existing one for a duplicate."""
        session, created = self._store.create_or_get(topic)
        if created:
            logger.info(f"Opened topic '{session.topic}' as {session.session_id}")
            self._start_load(session.session_id)
        if wait:
            await self.wait_for(session.session_id)
        return self._store.get(session.session_id) or session

    async def refresh(self, session_id: str, *, wait: bool = False) -> Optional[TopicSession]:
        """Restart the full two-tier sequence for a session from scratch."""
        if self._store.get(session_id) is None:
            return None
        task = self._tasks.get(session_id)
        if task is not None and not task.done():
            if wait:
                await self.wait_for(session_id)
            return self._store.get(session_id)
        self._start_load(session_id)
        if wait:
            await self.wait_for(session_id)
        return self._store.get(session_id)

    async def close(self, session_id: str) -> bool:
        task = self._tasks.pop(session_id, None)
        removed = self._store.remove(session_id)
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        if removed:
            logger.info(f"Closed topic '{removed.topic}' ({session_id})")
        return removed is not None

    def get(self, session_id: str) -> Optional[TopicSession]:
        return self._store.get(session_id)

    def list_sessions(self) -> List[TopicSession]:
        return self._store.list_sessions()

    @property
    def active_id(self) -> Optional[str]:
        return self._store.active_id

    def activate(self, session_id: str) -> bool:
        return self._store.activate(session_id)

    async def wait_for(self, session_id: str) -> Optional[TopicSession]:
        task = self._tasks.get(session_id)
        if task is not None and not task.done():
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                # a load cancelled by close() leaves the waiter with the closed-session result
                if not task.cancelled():
                    raise
        return self._store.get(session_id)

    async def ensure_default_topic(self, *, wait: bool = False) -> Optional[TopicSession]:
        """Seed an empty board with the configured default topic."""
        if not self._store.is_empty():
            return None
        return await self.open_topic(get_general_settings().default_topic, wait=wait)

    async def explore_trending(self, session_id: str, index: int, *, wait: bool = False) -> Optional[TopicSession]:
        """Open a new tab for one of a ready feed's trending topics."""
        session = self._store.get(session_id)
        if session is None or session.state != TopicState.READY or session.feed is None:
            return None
        trending = session.feed.sidebar.trending_topics
        if not 0 <= index < len(trending):
            return None
        return await self.open_topic(trending[index], wait=wait)

    async def aclose(self) -> None:
        for session_id in list(self._tasks):
            task = self._tasks.pop(session_id)
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

    def _start_load(self, session_id: str) -> None:
        if self._store.mark_loading(session_id) is None:
            return
        self._tasks[session_id] = asyncio.create_task(self._load(session_id))

    async def _load(self, session_id: str) -> None:
        session = self._store.get(session_id)
        if session is None:
            return
        try:
            feed = await self.service.fetch_feed(session.topic)
        except (NewsFeedError, ValueError) as exc:
            logger.warning(f"Topic '{session.topic}' failed: {exc}")
            self._store.mark_failed(session_id, str(exc))
            return
        self._store.mark_ready(session_id, feed)
