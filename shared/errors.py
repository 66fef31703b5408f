"""Error types shared by the clients and the search engine services."""


class ServiceUnavailableError(Exception):
    """Raised when an external backend (embedding service, vector store) is
    unreachable, times out, answers with a non-2xx status or returns a body
    that cannot be used.

    Attributes:
        service: Short name of the failing backend (e.g. "embed/ollama").
        status_code: HTTP status code of the failed response, if any.
    """

    def __init__(self, message: str, service: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.service = service
        self.status_code = status_code


class InvalidArgumentError(ValueError):
    """Raised for missing or invalid arguments (e.g. an empty query) before any
    network call is made."""
