"""Instruction text sent to the generative endpoint."""

from __future__ import annotations

from core import FeedCounts


SYSTEM_INSTRUCTION = (
    "You are a precise news aggregation engine. "
    "Return only JSON that matches the schema."
)


def build_prompt(topic: str, counts: FeedCounts) -> str:
    """Render the user instruction for one topic and tier. Same inputs, same text."""
    return f"""
Perform a comprehensive web search for the latest news on the topic: "{topic}".

STRICT REQUIREMENTS:
1. Use ONLY actual, verified URLs found in your search results. DO NOT invent or "predict" URLs.
2. Prioritize breaking news and articles from the last 24-72 hours.
3. Ensure every "source" name matches the actual publication found in the search results.

Structure the response as a JSON object with this format:
- "topic": The exact search topic.
- "topStories": {counts.top_stories} major stories. Each must have:
   - "id": A unique string.
   - "title": The actual headline or a very close summary.
   - "summary": 1-2 short sentences of context (<= 220 chars).
   - "source": The publisher name (e.g., "The Verge", "Reuters").
   - "url": The exact valid link to the article.
   - "timestamp": A relative time string (e.g., "2 hours ago").
   - "relatedSources": 2-4 other real links/sources reporting on the same story. Keep snippets <= 140 chars.
- "riverOfNews": {counts.river_of_news} shorter, recent news items with title, source, and valid URL.
- "sidebar":
   - "quickLinks": {counts.quick_links} links to deep-dive analysis or official pages.
   - "trendingTopics": {counts.trending_topics} related search terms for navigation.
If you cannot find enough results, expand the search query, but still return the exact counts above.
Return a single JSON object only. Do not include markdown, code fences, or trailing text.
""".strip()
