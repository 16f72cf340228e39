"""Exception types shared by the proxy, the completion clients and the workflow."""

GENERIC_FAILURE_MESSAGE = "Failed to generate content. Please try again."


class EmailWriterError(Exception):
    """Base class for application errors."""


class ConfigurationError(EmailWriterError):
    """Required configuration (e.g. the provider API key) is missing."""


class UpstreamError(EmailWriterError):
    """The LLM provider could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(UpstreamError):
    """The provider answered 2xx but the body lacks the generated text."""


class GenerationError(EmailWriterError):
    """Caller-facing failure: one generic message whatever went wrong underneath."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)
