"""OpenAI-compatible chat-completions client used by the proxy to reach the LLM provider."""

from typing import Any

import httpx

from email_writer.config import (
    LLM_API_KEY,
    LLM_BASE_URL,
    LLM_MAX_TOKENS,
    LLM_MODEL,
    LLM_TEMPERATURE,
    LLM_TIMEOUT_SECONDS,
)
from email_writer.errors import ConfigurationError, MalformedResponseError, UpstreamError
from email_writer.utils.logger import get_logger

logger = get_logger("email_writer.llm.provider")


def _extract_content(data: Any) -> str:
    """Return choices[0].message.content or raise MalformedResponseError."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError("Provider response is missing choices[0].message.content") from e
    if not isinstance(content, str):
        raise MalformedResponseError("Provider response content is not a string")
    return content


class ChatCompletionClient:
    """Single best-effort request/response round trip; no retry, no streaming."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = LLM_API_KEY if api_key is None else api_key
        self._base_url = (base_url or LLM_BASE_URL).rstrip("/")
        self._model = model or LLM_MODEL
        self._temperature = LLM_TEMPERATURE if temperature is None else temperature
        self._max_tokens = max_tokens or LLM_MAX_TOKENS
        self._http_client = http_client

    @property
    def model(self) -> str:
        return self._model

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def build_payload(self, prompt: str) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

    async def complete(self, prompt: str) -> str:
        """Send the prompt and return the generated text.

        Raises ConfigurationError (no API key; checked before any I/O), UpstreamError
        (transport failure or non-2xx; status_code set when known) or MalformedResponseError.
        """
        if not self._api_key:
            raise ConfigurationError("LLM_API_KEY is not configured")

        url = f"{self._base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(prompt)
        log = logger.bind(model=self._model, prompt_chars=len(prompt))
        log.debug("llm.request.start", url=url)
        try:
            if self._http_client is not None:
                response = await self._http_client.post(url, headers=headers, json=payload)
            else:
                async with httpx.AsyncClient(timeout=LLM_TIMEOUT_SECONDS) as client:
                    response = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            log.warning("llm.request.transport_error", error=str(e))
            raise UpstreamError(f"Could not reach LLM provider: {e}") from e

        if not response.is_success:
            log.warning(
                "llm.request.http_error",
                status_code=response.status_code,
                body=response.text[:200],
            )
            raise UpstreamError(
                f"LLM provider returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError("LLM provider returned a non-JSON body") from e
        content = _extract_content(data)
        log.debug("llm.request.complete", content_chars=len(content))
        return content
