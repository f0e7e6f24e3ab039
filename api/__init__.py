"""
Exa API transport: HTTP client, SSE decoder and error types.

Only the error types are re-exported here; the request and response models
depend on them, so the client is imported from ``api.exa_client`` directly.
"""

from .errors import (
    AuthRequiredError,
    ExaCLIError,
    FilterEvaluationError,
    SerializationError,
    StreamDecodeError,
    TransportError,
    ValidationError,
)

__all__ = [
    "AuthRequiredError",
    "ExaCLIError",
    "FilterEvaluationError",
    "SerializationError",
    "StreamDecodeError",
    "TransportError",
    "ValidationError",
]
