"""Custom exception classes for the catalog search service."""


class CatalogServiceError(Exception):
    """Base exception for all catalog service errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class TransportError(CatalogServiceError):
    """Raised on a connection failure or a non-2xx response from the catalog API."""

    def __init__(
        self,
        message: str = "Encountered unexpected error.",
        status_code: int | None = None,
        cause: BaseException | None = None,
        details: dict | None = None,
    ):
        self.status_code = status_code
        self.cause = cause
        super().__init__(message, details)


class MalformedResponseError(CatalogServiceError):
    """Raised when a response body is not JSON or has an unrecognized shape."""

    pass


class MissingFieldError(CatalogServiceError):
    """Raised when a required field is absent while decoding a resource."""

    def __init__(self, field_name: str, details: dict | None = None):
        self.field_name = field_name
        super().__init__(f"Missing field: {field_name}", details)


class ConfigurationError(CatalogServiceError):
    """Raised when there's a configuration error."""

    pass
