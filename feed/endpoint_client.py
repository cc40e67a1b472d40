"""
Endpoint Client
Responses API 调用: 构建请求、附带 schema、从响应信封中提取文本
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from config import get_endpoint_settings
from core import FeedCounts
from utils.exceptions import ConfigurationError, EndpointError

from .prompt_builder import SYSTEM_INSTRUCTION, build_prompt
from .schema import build_response_format


logger = logging.getLogger(__name__)

TEMPERATURE = 0.2
WEB_SEARCH_TOOL = {"type": "web_search", "search_context_size": "high"}


def extract_output_text(envelope: Any) -> Optional[str]:
    """
    Pull generated text out of a Responses API envelope.

    The flattened ``output_text`` field wins when it holds non-blank text;
    otherwise every ``output[].content[]`` entry tagged ``output_text`` is
    concatenated in source order. Returns None when nothing usable is found.
    """
    if not isinstance(envelope, dict):
        return None

    flattened = envelope.get("output_text")
    if isinstance(flattened, str) and flattened.strip():
        return flattened

    parts: List[str] = []
    for item in envelope.get("output") or []:
        if not isinstance(item, dict):
            continue
        for content in item.get("content") or []:
            if not isinstance(content, dict) or content.get("type") != "output_text":
                continue
            text = content.get("text")
            if isinstance(text, str) and text:
                parts.append(text)

    return "".join(parts) if parts else None


class ResponsesEndpointClient:
    """Single-shot client for the schema-constrained web-search endpoint. No retries here."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        settings = get_endpoint_settings()
        self.api_key = str(api_key if api_key is not None else (settings.api_key or "")).strip()
        self.model = str(model or settings.model).strip()
        self.base_url = str(base_url or settings.base_url).strip().rstrip("/")
        self.timeout_s = float(timeout_s if timeout_s is not None else settings.request_timeout_s)
        self._http_client = http_client

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/responses"

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise ConfigurationError(
                "Missing API key: set NEWSFEED_API_KEY or OPENAI_API_KEY",
                {"endpoint": self.endpoint},
            )

    def build_payload(self, topic: str, counts: FeedCounts, max_output_tokens: int) -> Dict[str, Any]:
        return {
            "model": self.model,
            "tools": [dict(WEB_SEARCH_TOOL)],
            "max_output_tokens": int(max_output_tokens),
            "temperature": TEMPERATURE,
            "input": [
                {"role": "system", "content": SYSTEM_INSTRUCTION},
                {"role": "user", "content": build_prompt(topic, counts)},
            ],
            "text": {"format": build_response_format()},
        }

    async def request(self, topic: str, counts: FeedCounts, max_output_tokens: int) -> str:
        """POST one request and return the raw generated text."""
        self.ensure_configured()

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(topic, counts, max_output_tokens)

        logger.debug(f"POST {self.endpoint} topic='{topic}' max_output_tokens={max_output_tokens}")
        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.endpoint, headers=headers, json=payload)
            else:
                async with httpx.AsyncClient(timeout=httpx.Timeout(self.timeout_s)) as client:
                    response = await client.post(self.endpoint, headers=headers, json=payload)
        except httpx.TimeoutException as exc:
            raise EndpointError(f"Endpoint request timed out after {self.timeout_s}s") from exc
        except httpx.RequestError as exc:
            raise EndpointError(f"Endpoint request failed: {exc}") from exc

        if not response.is_success:
            body = response.text
            raise EndpointError(
                f"Endpoint request failed: {response.status_code} {body[:200]}",
                status_code=response.status_code,
                body=body,
            )

        try:
            envelope = response.json()
        except ValueError as exc:
            raise EndpointError(
                "Endpoint returned a non-JSON envelope",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        output_text = extract_output_text(envelope)
        if not output_text:
            raise EndpointError("Endpoint returned empty output", status_code=response.status_code)

        return output_text
