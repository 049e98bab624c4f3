"""Domain exceptions shared by the providers, services and API layer."""


class ReelScoutError(Exception):
    """Base class for every error the API knows how to render."""

    status_code = 500

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_exception = original_exception


class InvalidRequestError(ReelScoutError):
    """Bad query, page, filter or watchlist input."""

    status_code = 400


class NotFoundError(ReelScoutError):
    """Provider record or watchlist item is absent."""

    status_code = 404


class DuplicateItemError(ReelScoutError):
    status_code = 409


class RateLimitError(ReelScoutError):
    """Raised when a client's request window is full."""

    status_code = 429


class UpstreamError(ReelScoutError):
    """An external provider failed or returned something unusable."""

    status_code = 502


class NotConfiguredError(ReelScoutError):
    """An optional provider was called without credentials."""

    status_code = 503
