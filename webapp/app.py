"""FastAPI app exposing feed fetches and the topic board."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from config import get_general_settings
from feed.service import FeedService
from orchestrator.service import TopicBoard
from utils.exceptions import ConfigurationError, FetchError
from utils.logger import setup_logger
from webapp.runtime import get_board, get_feed_service


setup_logger(level=get_general_settings().log_level)

app = FastAPI(title="Topic News Feed API")


class TopicPayload(BaseModel):
    topic: str

    @field_validator("topic")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("value is required")
        return text


def _session_or_404(board: TopicBoard, session_id: str) -> Dict[str, Any]:
    session = board.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="topic not found")
    return {"session": session.to_wire(), "active": board.active_id == session_id}


@app.get("/api/health")
def health() -> Dict[str, Any]:
    return {"ok": True, "ts": datetime.now(timezone.utc).isoformat(timespec="seconds")}


@app.post("/api/feeds")
async def fetch_feed(payload: TopicPayload, service: FeedService = Depends(get_feed_service)) -> Dict[str, Any]:
    try:
        feed = await service.fetch_feed(payload.topic)
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except FetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return feed.to_wire()


@app.get("/api/topics")
def list_topics(board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    sessions = board.list_sessions()
    return {
        "active_id": board.active_id,
        "count": len(sessions),
        "sessions": [session.to_wire() for session in sessions],
    }


@app.post("/api/topics")
async def open_topic(payload: TopicPayload, wait: bool = False, board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    session = await board.open_topic(payload.topic, wait=wait)
    return {"session": session.to_wire(), "active": board.active_id == session.session_id}


@app.get("/api/topics/{session_id}")
def get_topic(session_id: str, board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    return _session_or_404(board, session_id)


@app.post("/api/topics/{session_id}/refresh")
async def refresh_topic(session_id: str, wait: bool = False, board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    session = await board.refresh(session_id, wait=wait)
    if session is None:
        raise HTTPException(status_code=404, detail="topic not found")
    return _session_or_404(board, session_id)


@app.post("/api/topics/{session_id}/activate")
def activate_topic(session_id: str, board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    if not board.activate(session_id):
        raise HTTPException(status_code=404, detail="topic not found")
    return _session_or_404(board, session_id)


@app.delete("/api/topics/{session_id}")
async def close_topic(session_id: str, board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    closed = await board.close(session_id)
    if not closed:
        raise HTTPException(status_code=404, detail="topic not found")
    return {"session_id": session_id, "closed": True, "active_id": board.active_id}


@app.post("/api/topics/{session_id}/trending/{index}")
async def explore_trending(session_id: str, index: int, wait: bool = False, board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    session = await board.explore_trending(session_id, index, wait=wait)
    if session is None:
        raise HTTPException(status_code=404, detail="trending topic not available")
    return {"session": session.to_wire(), "active": board.active_id == session.session_id}


@app.post("/api/board/seed")
async def seed_board(wait: bool = False, board: TopicBoard = Depends(get_board)) -> Dict[str, Any]:
    session = await board.ensure_default_topic(wait=wait)
    return {"seeded": session is not None, "session": session.to_wire() if session else None}
