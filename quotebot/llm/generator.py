"""
quotebot/llm/generator.py

Chat-completions client for the daily quote.

One POST per attempt, at most MAX_ATTEMPTS attempts. Only HTTP 429 is retried,
with a linear backoff; every other failure ends generation with None so the
caller can fall back to static text.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Sequence

import httpx

from ..config.settings import AISettings
from .errors import LLMConnectionError, LLMError, LLMRateLimitError, error_for_status, parse_error_message
from .prompt import build_prompt


logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RATE_LIMIT_BACKOFF_SECONDS = 0.6

SENTINEL_TOKENS = (
    "<|begin_of_text|>",
    "<|end_of_text|>",
    "<｜begin▁of▁sentence｜>",
    "<s>",
    "</s>",
    "<BOS>",
    "<EOS>",
    "<|im_start|>",
    "<|im_end|>",
)


def strip_thinking(text: str) -> str:
    return re.sub(r"<think>.*?</think>", "", text, flags=re.DOTALL)


def clean_quote(raw: str) -> str:
    cleaned = strip_thinking(raw)
    for token in SENTINEL_TOKENS:
        cleaned = cleaned.replace(token, "")
    return cleaned.strip()


def extract_content(data: Any) -> str:
    """Return choices[0].message.content, or '' when the body is shaped differently."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


def _upstream_message(data: Any) -> str | None:
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
        if message:
            return str(message)
    return None


class QuoteGenerator:
    def __init__(
        self,
        settings: AISettings,
        language: str,
        http_client: httpx.AsyncClient,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self.language = language
        self.http_client = http_client
        self._sleep = sleep

    def build_headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if "openrouter.ai" in self.settings.api_url:
            if self.settings.openrouter_referer:
                headers["HTTP-Referer"] = self.settings.openrouter_referer
            if self.settings.openrouter_title:
                headers["X-Title"] = self.settings.openrouter_title
        return headers

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self.settings.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
        }

    async def _request(self, payload: dict[str, Any], headers: dict[str, str]) -> str:
        try:
            response = await self.http_client.post(self.settings.api_url, json=payload, headers=headers)
        except httpx.TransportError as e:
            raise LLMConnectionError(f"{type(e).__name__}: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            raise error_for_status(response.status_code, _upstream_message(data))
        return extract_content(data)

    async def generate(self, context_lines: Sequence[str] = ()) -> str | None:
        """
        Generate one quote. Returns the cleaned text, or None on any failure.
        """
        if not self.settings.api_key:
            logger.warning("AI_API_KEY not set; skipping quote generation")
            return None

        payload = self.build_payload(build_prompt(self.language, context_lines))
        headers = self.build_headers()
        last_error: LLMError | None = None

        try:
            for attempt in range(MAX_ATTEMPTS):
                try:
                    raw = await self._request(payload, headers)
                except LLMRateLimitError as e:
                    last_error = e
                    if attempt == MAX_ATTEMPTS - 1:
                        break
                    wait = RATE_LIMIT_BACKOFF_SECONDS * (attempt + 1)
                    logger.warning("Rate limited (429). Retrying in %dms...", round(wait * 1000))
                    await self._sleep(wait)
                    continue

                quote = clean_quote(raw)
                if not quote:
                    logger.warning("AI endpoint returned an empty quote")
                    return None
                return quote
        except LLMError as e:
            logger.error("AI error: %s", parse_error_message(e))
            return None
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected error while generating quote")
            return None

        logger.error("AI error after %d attempts: %s", MAX_ATTEMPTS, parse_error_message(last_error))
        return None
