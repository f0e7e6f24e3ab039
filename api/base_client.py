import json
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

import httpx

from api.errors import SerializationError, TransportError
from api.stream_decoder import DoneCallback, StreamDecoder, TextCallback
from utils.api_key_utils import mask_api_key, redact_api_key

DEFAULT_TIMEOUT_S = 60.0
MAX_DEBUG_BODY_CHARS = 2000
MAX_ERROR_BODY_CHARS = 500


def truncate_body(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class BaseAPIClient(ABC):
    """
    Abstract base class for JSON-over-HTTPS API clients.

    Owns the connection pool, authentication headers and debug tracing.
    Subclasses add one method per endpoint on top of send() and send_stream().
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        logger: logging.Logger | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            api_key: API key sent in the x-api-key header
            base_url: Service root, trailing slashes are ignored
            logger: Debug sink for request/response traces (None disables tracing)
            timeout: Deadline for one-shot requests; streaming requests have none
            transport: Optional httpx transport (used by tests to mock the network)
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.logger = logger
        self.timeout = timeout
        self._http = httpx.Client(timeout=timeout, transport=transport)
        self._active_stream: httpx.Response | None = None
        self._stream_cancel: threading.Event | None = None

    @property
    @abstractmethod
    def user_agent(self) -> str:
        """User-Agent header value, e.g. ``exa-cli/1.0.0``."""

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self, **extra: str) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "User-Agent": self.user_agent,
        }
        headers.update(extra)
        return headers

    def _trace(self, message: str, **fields: Any) -> None:
        if self.logger is None or not self.logger.isEnabledFor(logging.DEBUG):
            return
        message = redact_api_key(message, self.api_key)
        self.logger.debug(message, extra={"extra_fields": fields} if fields else None)

    def _encode(self, body: Any) -> bytes | None:
        if body is None:
            return None
        try:
            return json.dumps(body).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"marshal request: {e}") from e

    def _trace_request(self, method: str, url: str, content: bytes | None) -> None:
        if content is None:
            self._trace(f"{method} {url}", api_key=mask_api_key(self.api_key))
        else:
            body = truncate_body(content.decode("utf-8"), MAX_DEBUG_BODY_CHARS)
            self._trace(f"{method} {url} body={body}", api_key=mask_api_key(self.api_key))

    def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, str] | None = None,
    ) -> Any:
        """
        Send one JSON request and return the decoded response body.

        Raises:
            TransportError: connection failure or status outside [200, 300)
            SerializationError: body not encodable or response not valid JSON
        """
        url = self._url(path)
        content = self._encode(body)
        self._trace_request(method, url, content)

        try:
            response = self._http.request(
                method, url, content=content, params=params, headers=self._headers()
            )
        except httpx.TransportError as e:
            raise TransportError.from_exception(e) from e

        text = response.text
        self._trace(f"Response status: {response.status_code}", status_code=response.status_code)
        self._trace(f"Response body: {truncate_body(text, MAX_DEBUG_BODY_CHARS)}")

        if not 200 <= response.status_code < 300:
            raise TransportError.from_status(
                response.status_code, truncate_body(text, MAX_ERROR_BODY_CHARS)
            )

        if not text.strip():
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise SerializationError(f"parse response: {e}") from e

    def send_stream(
        self,
        path: str,
        body: Any,
        on_text: TextCallback | None = None,
        on_done: DoneCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """
        POST a request and decode its server-sent-event response.

        No timeout applies, so long generations are never cut off. The status
        is checked before any line is read. Setting ``cancel_event`` (or calling
        cancel() from another thread) closes the connection and stops callbacks.
        """
        url = self._url(path)
        content = self._encode(body)
        self._trace_request("POST", url, content)

        cancel_event = cancel_event or threading.Event()
        self._stream_cancel = cancel_event
        decoder = StreamDecoder(on_text, on_done, logger=self.logger, cancel_event=cancel_event)
        headers = self._headers(Accept="text/event-stream")

        try:
            with self._http.stream(
                "POST", url, content=content, headers=headers, timeout=None
            ) as response:
                self._trace(
                    f"Response status: {response.status_code}", status_code=response.status_code
                )
                if not 200 <= response.status_code < 300:
                    text = response.read().decode("utf-8", errors="replace")
                    raise TransportError.from_status(
                        response.status_code, truncate_body(text, MAX_ERROR_BODY_CHARS)
                    )

                self._active_stream = response
                decoder.decode(response.iter_lines())
        except (httpx.TransportError, httpx.StreamError) as e:
            if cancel_event.is_set():
                self._trace("Stream cancelled")
                return
            raise TransportError.from_exception(e) from e
        finally:
            self._active_stream = None
            self._stream_cancel = None

    def cancel(self) -> None:
        """Stop an in-flight stream; safe to call from another thread."""
        if self._stream_cancel is not None:
            self._stream_cancel.set()
        stream = self._active_stream
        if stream is not None:
            stream.close()

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
