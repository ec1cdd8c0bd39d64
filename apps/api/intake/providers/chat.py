import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import AsyncIterator

import httpx

from intake.core import get_settings
from intake.core.constants import MOCK_CHAT_MESSAGE, MOCK_SESSION_SUMMARY

logger = logging.getLogger(__name__)


class ChatServiceError(Exception):
    """Raised when the chat/LLM API is unavailable or returns invalid or unexpected output."""


class ChatRateLimitError(ChatServiceError):
    """Raised when the chat/LLM API rate limits the request."""


class ChatConfigError(ChatServiceError):
    """Raised when no chat/LLM backend is configured."""


def _to_api_messages(system_prompt: str | None, messages: list[dict[str, str]]) -> list[dict[str, str]]:
    out: list[dict[str, str]] = []
    if system_prompt:
        out.append({"role": "system", "content": system_prompt})
    out.extend(messages)
    return out


class ChatProvider(ABC):
    @abstractmethod
    def stream_reply(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
    ) -> AsyncIterator[str]:
        """Yield the assistant reply as text deltas."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        max_tokens: int = 500,
    ) -> str:
        """Return one full assistant reply."""

    @abstractmethod
    async def check(self) -> dict:
        """Minimal request to validate credentials. Returns {ok, error?, message?}."""


class OpenAICompatibleChatProvider(ChatProvider):
    """OpenAI-compatible endpoint (vLLM, etc.)."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        model: str,
        max_tokens: int = 2048,
    ):
        self.base_url = base_url.rstrip("/")
        if not self.base_url.endswith("/v1"):
            self.base_url = f"{self.base_url}/v1"
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _payload(self, messages: list[dict[str, str]], max_tokens: int, stream: bool) -> dict:
        return {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": 0.7,
            "stream": stream,
        }

    async def _chat(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        payload = self._payload(messages, max_tokens, stream=False)
        retries = 3
        base_delay_s = 1.0

        for attempt in range(retries + 1):
            try:
                async with httpx.AsyncClient(timeout=60.0) as client:
                    r = await client.post(
                        f"{self.base_url}/chat/completions",
                        json=payload,
                        headers=self._headers(),
                    )
                    r.raise_for_status()
                    data = r.json()
                    choices = data.get("choices") or []
                    if not choices:
                        raise ChatServiceError(
                            "Chat API returned no choices (e.g. content filter)."
                        )
                    msg = choices[0].get("message") or {}
                    content = msg.get("content")
                    if content is None or not isinstance(content, str):
                        raise ChatServiceError(
                            "Chat API returned missing or non-string content."
                        )
                    return content.strip()
            except httpx.HTTPStatusError as e:
                if e.response.status_code == 429:
                    if attempt < retries:
                        retry_after = e.response.headers.get("Retry-After")
                        try:
                            delay_s = float(retry_after) if retry_after else base_delay_s
                        except ValueError:
                            delay_s = base_delay_s
                        await asyncio.sleep(delay_s * (attempt + 1))
                        continue
                    raise ChatRateLimitError(
                        "Chat API rate limited the request. Please retry later."
                    ) from e
                body = getattr(e.response, "text", None) or ""
                if body:
                    logger.warning(
                        "Chat API error %s: %s",
                        e.response.status_code,
                        body[:500],
                    )
                raise ChatServiceError(
                    f"Chat API returned {e.response.status_code}. Please try again later."
                ) from e
            except httpx.RequestError as e:
                raise ChatServiceError(
                    "Chat service unavailable (timeout or connection error). Please try again later."
                ) from e
            except (KeyError, TypeError, IndexError, ValueError) as e:
                raise ChatServiceError("Chat API returned unexpected response format.") from e
        raise ChatServiceError("Chat API request failed.")

    async def stream_reply(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
    ) -> AsyncIterator[str]:
        payload = self._payload(
            _to_api_messages(system_prompt, messages), self.max_tokens, stream=True
        )
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(60.0, read=120.0)) as client:
                async with client.stream(
                    "POST",
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers(),
                ) as r:
                    if r.status_code >= 400:
                        body = (await r.aread()).decode("utf-8", errors="replace")
                        if body:
                            logger.warning("Chat API stream error %s: %s", r.status_code, body[:500])
                        if r.status_code == 429:
                            raise ChatRateLimitError(
                                "Chat API rate limited the request. Please retry later."
                            )
                        raise ChatServiceError(
                            f"Chat API returned {r.status_code}. Please try again later."
                        )
                    async for line in r.aiter_lines():
                        line = line.strip()
                        if not line.startswith("data:"):
                            continue
                        data = line[5:].strip()
                        if data == "[DONE]":
                            break
                        try:
                            chunk = json.loads(data)
                        except json.JSONDecodeError:
                            logger.debug("Skipping non-JSON stream line: %s", data[:200])
                            continue
                        choices = chunk.get("choices") or []
                        if not choices:
                            continue
                        delta = (choices[0].get("delta") or {}).get("content")
                        if isinstance(delta, str) and delta:
                            yield delta
        except httpx.RequestError as e:
            raise ChatServiceError(
                "Chat service unavailable (timeout or connection error). Please try again later."
            ) from e

    async def complete(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        max_tokens: int = 500,
    ) -> str:
        return await self._chat(_to_api_messages(system_prompt, messages), max_tokens=max_tokens)

    async def check(self) -> dict:
        payload = self._payload([{"role": "user", "content": "Hi"}], 1, stream=False)
        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                r = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers(),
                )
                r.raise_for_status()
            return {"ok": True}
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            if code == 403:
                return {
                    "ok": False,
                    "error": "FORBIDDEN",
                    "message": "Your API key doesn't have permission for this model.",
                }
            if code == 401:
                return {
                    "ok": False,
                    "error": "INVALID_KEY",
                    "message": "Invalid API key. Check CHAT_API_KEY / OPENAI_API_KEY.",
                }
            return {"ok": False, "error": "UNKNOWN", "message": f"Chat API returned {code}."}
        except httpx.RequestError as e:
            return {"ok": False, "error": "UNKNOWN", "message": str(e) or "Chat API unreachable."}


class OpenAIChatProvider(OpenAICompatibleChatProvider):
    """Official OpenAI API."""

    def __init__(self):
        s = get_settings()
        super().__init__(
            base_url="https://api.openai.com/v1",
            api_key=s.openai_api_key,
            model=s.chat_model or _OPENAI_DEFAULT_MODEL,
            max_tokens=s.chat_max_tokens,
        )


class MockChatProvider(ChatProvider):
    """No external calls; deterministic replies for local development (LLM_MODE=mock)."""

    async def stream_reply(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
    ) -> AsyncIterator[str]:
        yield MOCK_CHAT_MESSAGE

    async def complete(
        self,
        system_prompt: str,
        messages: list[dict[str, str]],
        max_tokens: int = 500,
    ) -> str:
        return MOCK_SESSION_SUMMARY

    async def check(self) -> dict:
        return {"ok": True}


# Default model for OpenAI official API when CHAT_MODEL is not set
_OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
# Default model for OpenAI-compatible (vLLM, etc.) when CHAT_MODEL is not set
_OPENAI_COMPATIBLE_DEFAULT_MODEL = "Qwen/Qwen2.5-7B-Instruct"


def get_chat_provider() -> ChatProvider:
    s = get_settings()
    if s.is_mock_llm:
        return MockChatProvider()
    if s.openai_api_key and not s.chat_api_base_url:
        return OpenAIChatProvider()
    if s.chat_api_base_url:
        return OpenAICompatibleChatProvider(
            base_url=s.chat_api_base_url,
            api_key=s.chat_api_key,
            model=s.chat_model or _OPENAI_COMPATIBLE_DEFAULT_MODEL,
            max_tokens=s.chat_max_tokens,
        )
    raise ChatConfigError(
        "Chat LLM not configured. Set OPENAI_API_KEY or CHAT_API_BASE_URL (and CHAT_MODEL), or LLM_MODE=mock."
    )
