"""FastAPI proxy: forwards a prompt to the LLM provider and relays the generated text."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from email_writer.config import LLM_TIMEOUT_SECONDS
from email_writer.errors import ConfigurationError, MalformedResponseError, UpstreamError
from email_writer.llm.provider import ChatCompletionClient
from email_writer.models.api import ErrorResponse, GenerateRequest, GenerateResponse
from email_writer.utils.logger import get_logger

logger = get_logger("email_writer.proxy.server")

GENERIC_ERROR = "Failed to generate response"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@asynccontextmanager
async def _lifespan(app: FastAPI, create_client: bool = True):
    """Own one pooled HTTP client for the provider for the lifetime of the server."""
    http_client: httpx.AsyncClient | None = None
    if create_client:
        http_client = httpx.AsyncClient(timeout=LLM_TIMEOUT_SECONDS)
        app.state.completion_client = ChatCompletionClient(http_client=http_client)
        if not app.state.completion_client.configured:
            logger.warning("proxy.lifespan.no_credentials")
        logger.info("proxy.lifespan.client_created", model=app.state.completion_client.model)

    yield

    if http_client is not None:
        try:
            await http_client.aclose()
        except Exception as e:
            logger.debug("proxy.lifespan.client_close_error", error=str(e))


def create_app(completion_client: ChatCompletionClient | None = None) -> FastAPI:
    """
    Create the proxy app. When completion_client is passed (tests), it is used as is;
    otherwise the lifespan builds one from configuration.
    """
    create_in_lifespan = completion_client is None
    app = FastAPI(
        title="Email Writer Proxy",
        version="0.1.0",
        lifespan=lambda app: _lifespan(app, create_client=create_in_lifespan),
    )
    if completion_client is not None:
        app.state.completion_client = completion_client

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/generate", response_model=None)
    async def generate(request: Request) -> JSONResponse | GenerateResponse:
        try:
            body = GenerateRequest.model_validate(await request.json())
        except (ValueError, ValidationError) as e:
            logger.info("proxy.generate.bad_request", error=str(e))
            return _error(400, "prompt is required")

        client: ChatCompletionClient = request.app.state.completion_client
        log = logger.bind(prompt_chars=len(body.prompt))
        try:
            content = await client.complete(body.prompt)
        except ConfigurationError as e:
            log.error("proxy.generate.not_configured", error=str(e))
            return _error(500, "Server is missing the LLM API credential")
        except MalformedResponseError as e:
            log.error("proxy.generate.malformed_response", error=str(e))
            return _error(500, "Invalid response from LLM provider")
        except UpstreamError as e:
            log.error("proxy.generate.upstream_error", status_code=e.status_code, error=str(e))
            return _error(e.status_code or 500, str(e) if e.status_code else GENERIC_ERROR)
        except Exception as e:
            log.exception("proxy.generate.unexpected_error", error=str(e))
            return _error(500, GENERIC_ERROR)

        log.info("proxy.generate.ok", content_chars=len(content))
        return GenerateResponse(content=content)

    return app
