"""Incremental decoder for the /answer server-sent-event stream."""

import logging
import threading
from collections.abc import Callable, Iterable

from pydantic import ValidationError as SchemaError

from api.errors import StreamDecodeError
from models.responses import AnswerResponse, StreamEvent

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

TextCallback = Callable[[str], None]
DoneCallback = Callable[[AnswerResponse], None]


def parse_event(payload: str) -> StreamEvent:
    """Parse one ``data:`` payload, raising StreamDecodeError on bad JSON."""
    try:
        return StreamEvent.model_validate_json(payload)
    except SchemaError as e:
        raise StreamDecodeError(f"Failed to parse SSE chunk: {e}") from e


class StreamDecoder:
    """
    Single forward pass over SSE lines.

    Text deltas go to ``on_text`` in arrival order; the terminal event (the
    one carrying citations) goes to ``on_done`` and ends decoding. A malformed
    line is logged at debug level and skipped. Once ``cancel_event`` is set no
    callback fires.
    """

    def __init__(
        self,
        on_text: TextCallback | None = None,
        on_done: DoneCallback | None = None,
        logger: logging.Logger | None = None,
        cancel_event: threading.Event | None = None,
    ):
        self.on_text = on_text
        self.on_done = on_done
        self.logger = logger
        self.cancel_event = cancel_event
        self.finished = False

    @property
    def cancelled(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()

    def feed(self, line: str) -> bool:
        """
        Process one line. Returns False when decoding must stop, either
        because the terminal sentinel arrived or the stream was cancelled.
        """
        if self.finished:
            return False
        if self.cancelled:
            self.finished = True
            return False

        line = line.rstrip("\r\n")
        if not line.startswith(DATA_PREFIX):
            return True

        payload = line[len(DATA_PREFIX):]
        if payload == DONE_SENTINEL:
            self.finished = True
            return False

        try:
            event = parse_event(payload)
        except StreamDecodeError as e:
            if self.logger:
                self.logger.debug(str(e))
            return True

        self._dispatch(event)
        return not self.finished

    def _dispatch(self, event: StreamEvent) -> None:
        if event.is_text_delta and self.on_text:
            if self.cancelled:
                self.finished = True
                return
            self.on_text(event.text)
        if event.is_terminal:
            self.finished = True
            if self.on_done and not self.cancelled:
                self.on_done(event.to_answer())

    def decode(self, lines: Iterable[str]) -> None:
        """Feed lines until the stream ends, the sentinel arrives or it is cancelled."""
        for line in lines:
            if not self.feed(line):
                break
