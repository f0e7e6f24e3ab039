"""Exception hierarchy for the Exa CLI.

Errors are tagged at the point of failure so the classifier can dispatch on
type and status code instead of re-parsing message text.
"""


class ExaCLIError(Exception):
    """Base class for every error the CLI reports to the user."""


class ValidationError(ExaCLIError):
    """Malformed local input (bad date, unreadable schema file, empty key)."""


class AuthRequiredError(ExaCLIError):
    """No credential could be resolved from the environment or config file."""


class TransportError(ExaCLIError):
    """
    Non-2xx HTTP status or connection failure.

    Attributes:
        status_code: HTTP status, or None when the request never got a response
        body: Response body already truncated for display
    """

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_status(cls, status_code: int, body: str) -> "TransportError":
        return cls(f"API error (status {status_code}): {body}", status_code=status_code, body=body)

    @classmethod
    def from_exception(cls, exc: Exception) -> "TransportError":
        return cls(f"request failed: {exc}")


class SerializationError(ExaCLIError):
    """Request body could not be encoded or response body could not be decoded."""


class StreamDecodeError(ExaCLIError):
    """A single SSE data line could not be parsed as a stream event."""


class FilterEvaluationError(ExaCLIError):
    """The --jq expression failed to compile or to evaluate against the data."""
