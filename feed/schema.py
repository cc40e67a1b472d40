"""Structured-output contract the generative endpoint must honor."""

from __future__ import annotations

from typing import Any, Dict, List


NEWS_FEED_SCHEMA_NAME = "news_feed"


def _strict_object(properties: Dict[str, Any]) -> Dict[str, Any]:
    # Strict mode needs every property listed as required and no extras.
    return {
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": list(properties),
    }


def _strings(*names: str) -> Dict[str, Any]:
    return {name: {"type": "string"} for name in names}


def _array_of(item_schema: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "array", "items": item_schema}


_RELATED_SOURCE = _strict_object(_strings("title", "source", "url", "snippet"))

_TOP_STORY = _strict_object(
    {
        **_strings("id", "title", "summary", "source", "url", "timestamp"),
        "relatedSources": _array_of(_RELATED_SOURCE),
    }
)

_RIVER_ITEM = _strict_object(_strings("title", "source", "url"))

_SIDEBAR = _strict_object(
    {
        "quickLinks": _array_of(_strict_object(_strings("title", "url", "source"))),
        "trendingTopics": _array_of({"type": "string"}),
    }
)

NEWS_FEED_SCHEMA: Dict[str, Any] = _strict_object(
    {
        "topic": {"type": "string"},
        "topStories": _array_of(_TOP_STORY),
        "riverOfNews": _array_of(_RIVER_ITEM),
        "sidebar": _SIDEBAR,
    }
)


def build_response_format() -> Dict[str, Any]:
    """`text.format` block for the Responses API in strict json_schema mode."""
    return {
        "type": "json_schema",
        "name": NEWS_FEED_SCHEMA_NAME,
        "schema": NEWS_FEED_SCHEMA,
        "strict": True,
    }


def iter_object_schemas(schema: Dict[str, Any] = NEWS_FEED_SCHEMA) -> List[Dict[str, Any]]:
    """Flatten every object node of the schema tree (depth-first)."""
    found: List[Dict[str, Any]] = []
    stack = [schema]
    while stack:
        node = stack.pop()
        if node.get("type") == "object":
            found.append(node)
            stack.extend(reversed(list(node.get("properties", {}).values())))
        elif node.get("type") == "array":
            stack.append(node["items"])
    return found
