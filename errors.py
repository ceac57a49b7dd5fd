"""Errors raised while building or parsing an insight request.

Transport failures are not wrapped: they surface as ``openai.APIError``
subclasses straight from the client.
"""


class InsightError(Exception):
    pass


class ConfigurationError(InsightError):
    """A required setting (the API key) is missing."""


class ResponseFormatError(InsightError):
    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class ServiceLogicError(InsightError):
    def __init__(self, message: str, upstream_error: str | None = None):
        super().__init__(message)
        self.upstream_error = upstream_error
