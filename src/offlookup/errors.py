"""Error types raised by the service and rendered as ``{error, message}``."""


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error


class ValidationError(ServiceError):
    """Malformed or missing required input."""

    status_code = 400
    error = "Invalid request"


class NotFoundError(ServiceError):
    """No record matched any of the lookup keys."""

    status_code = 404
    error = "Not found"


class UpstreamError(ServiceError):
    """The product store could not be reached or the query failed.

    The message is shown to the caller, so it must stay generic; the
    underlying driver error is logged where it is caught.
    """

    status_code = 500
