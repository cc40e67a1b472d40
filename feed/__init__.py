"""Feed acquisition and ranking pipeline."""

from .endpoint_client import ResponsesEndpointClient, extract_output_text
from .parser import parse_feed
from .prompt_builder import SYSTEM_INSTRUCTION, build_prompt
from .ranking import rank_feed, score_item
from .schema import NEWS_FEED_SCHEMA, build_response_format
from .service import FeedService, fetch_feed, get_default_service

__all__ = [
    "FeedService",
    "NEWS_FEED_SCHEMA",
    "ResponsesEndpointClient",
    "SYSTEM_INSTRUCTION",
    "build_prompt",
    "build_response_format",
    "extract_output_text",
    "fetch_feed",
    "get_default_service",
    "parse_feed",
    "rank_feed",
    "score_item",
]
