"""Request/response bodies of the local generation proxy."""

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    """POST /api/generate body."""

    prompt: str = Field(..., min_length=1)


class GenerateResponse(BaseModel):
    content: str


class ErrorResponse(BaseModel):
    error: str
