"""Topic session orchestration for the news feed board."""

from .service import TopicBoard
from .store import TopicSessionStore, topic_key

__all__ = [
    "TopicBoard",
    "TopicSessionStore",
    "topic_key",
]
