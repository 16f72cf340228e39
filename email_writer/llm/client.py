"""Completion clients seen by the workflow: via the local proxy, or in-process."""

import httpx

from email_writer.config import LLM_TIMEOUT_SECONDS, PROXY_URL
from email_writer.errors import EmailWriterError, GenerationError
from email_writer.llm.provider import ChatCompletionClient
from email_writer.utils.logger import get_logger

logger = get_logger("email_writer.llm.client")

GENERATE_PATH = "/api/generate"


class ProxyCompletionClient:
    """POSTs {prompt} to the local proxy; the provider credential never leaves the proxy."""

    def __init__(self, base_url: str | None = None, http_client: httpx.AsyncClient | None = None):
        self._url = (base_url or PROXY_URL).rstrip("/") + GENERATE_PATH
        self._http_client = http_client

    async def _post(self, prompt: str) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(self._url, json={"prompt": prompt})
        async with httpx.AsyncClient(timeout=LLM_TIMEOUT_SECONDS) as client:
            return await client.post(self._url, json={"prompt": prompt})

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._post(prompt)
            response.raise_for_status()
            content = response.json().get("content")
        except httpx.HTTPStatusError as e:
            logger.error(
                "completion.proxy.http_error",
                url=self._url,
                status_code=e.response.status_code,
                body=e.response.text[:200],
            )
            raise GenerationError() from e
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.error("completion.proxy.error", url=self._url, error=str(e))
            raise GenerationError() from e
        if not isinstance(content, str):
            logger.error("completion.proxy.missing_content", url=self._url)
            raise GenerationError()
        return content


class LocalCompletionClient:
    """Calls the provider directly from this process (no proxy); same error contract."""

    def __init__(self, provider: ChatCompletionClient | None = None):
        self._provider = provider or ChatCompletionClient()

    async def generate(self, prompt: str) -> str:
        try:
            return await self._provider.complete(prompt)
        except EmailWriterError as e:
            logger.error("completion.local.error", error=str(e), error_type=type(e).__name__)
            raise GenerationError() from e
