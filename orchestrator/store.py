"""In-memory topic session store with explicit state transitions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from core import NewsFeed, TopicSession, TopicState


logger = logging.getLogger(__name__)

_ALLOWED_TRANSITIONS = {
    TopicState.IDLE: {TopicState.LOADING},
    TopicState.LOADING: {TopicState.READY, TopicState.FAILED},
    TopicState.READY: {TopicState.LOADING},
    TopicState.FAILED: {TopicState.LOADING},
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_session_id() -> str:
    return f"topic_{uuid4().hex[:12]}"


def topic_key(topic: str) -> str:
    """Case-insensitive identity of a topic."""
    return " ".join(str(topic or "").split()).casefold()


class TopicSessionStore:
    """Thread-safe store for topic sessions, keyed by session id and topic."""

    def __init__(self) -> None:
        self._sessions: Dict[str, TopicSession] = {}
        self._by_topic: Dict[str, str] = {}
        self._order: List[str] = []
        self._active_id: Optional[str] = None
        self._lock = Lock()

    def create_or_get(self, topic: str) -> Tuple[TopicSession, bool]:
        """Return (session, created). Duplicate topics map to the existing session."""
        key = topic_key(topic)
        if not key:
            raise ValueError("topic is required")
        with self._lock:
            existing_id = self._by_topic.get(key)
            if existing_id:
                self._active_id = existing_id
                return self._sessions[existing_id].model_copy(deep=True), False

            session = TopicSession(session_id=_new_session_id(), topic=topic)
            self._sessions[session.session_id] = session
            self._by_topic[key] = session.session_id
            self._order.append(session.session_id)
            self._active_id = session.session_id
            return session.model_copy(deep=True), True

    def get(self, session_id: str) -> Optional[TopicSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    def list_sessions(self) -> List[TopicSession]:
        with self._lock:
            return [self._sessions[sid].model_copy(deep=True) for sid in self._order]

    def is_empty(self) -> bool:
        with self._lock:
            return not self._sessions

    @property
    def active_id(self) -> Optional[str]:
        with self._lock:
            return self._active_id

    def activate(self, session_id: str) -> bool:
        with self._lock:
            if session_id not in self._sessions:
                return False
            self._active_id = session_id
            return True

    def remove(self, session_id: str) -> Optional[TopicSession]:
        """Drop a session; if it was active, the latest remaining one becomes active."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                return None
            self._by_topic.pop(topic_key(session.topic), None)
            self._order = [sid for sid in self._order if sid != session_id]
            if self._active_id == session_id:
                self._active_id = self._order[-1] if self._order else None
            return session

    def mark_loading(self, session_id: str) -> Optional[TopicSession]:
        def _apply(session: TopicSession, now: datetime) -> None:
            session.attempts += 1
            session.feed = None
            session.error = None
            session.timestamps.started_at = now
            session.timestamps.completed_at = None

        return self._transition(session_id, TopicState.LOADING, _apply)

    def mark_ready(self, session_id: str, feed: NewsFeed) -> Optional[TopicSession]:
        def _apply(session: TopicSession, now: datetime) -> None:
            session.feed = feed
            session.error = None
            session.timestamps.completed_at = now

        return self._transition(session_id, TopicState.READY, _apply)

    def mark_failed(self, session_id: str, error: str) -> Optional[TopicSession]:
        def _apply(session: TopicSession, now: datetime) -> None:
            session.feed = None
            session.error = str(error or "unknown error")
            session.timestamps.completed_at = now

        return self._transition(session_id, TopicState.FAILED, _apply)

    def _transition(self, session_id: str, target: TopicState, apply) -> Optional[TopicSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if not session:
                return None
            if target not in _ALLOWED_TRANSITIONS[session.state]:
                logger.warning(f"Rejected transition {session.state.value} -> {target.value} for {session_id}")
                return None
            now = _utcnow()
            apply(session, now)
            session.state = target
            session.timestamps.updated_at = now
            return session.model_copy(deep=True)
