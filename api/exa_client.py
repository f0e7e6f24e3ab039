import logging
import threading
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from api.base_client import DEFAULT_TIMEOUT_S, BaseAPIClient
from api.errors import SerializationError
from api.stream_decoder import DoneCallback, TextCallback
from models.requests import (
    AnswerRequest,
    ContentsRequest,
    ContextRequest,
    FindSimilarRequest,
    SearchRequest,
    to_payload,
)
from models.responses import (
    AnswerResponse,
    APIKeysResponse,
    ContentsResponse,
    ContextResponse,
    FindSimilarResponse,
    SearchResponse,
    UsageResponse,
)

__version__ = "0.3.0"

DEFAULT_BASE_URL = "https://api.exa.ai"

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class ExaClient(BaseAPIClient):
    """
    Exa API client.

    One method per endpoint; each builds the wire payload from a request model
    and validates the JSON reply into the matching response model.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        logger: logging.Logger | None = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: httpx.BaseTransport | None = None,
        version: str = __version__,
    ):
        super().__init__(api_key, base_url, logger=logger, timeout=timeout, transport=transport)
        self.version = version

    @property
    def user_agent(self) -> str:
        return f"exa-cli/{self.version}"

    def _call(
        self,
        response_model: type[ResponseT],
        method: str,
        path: str,
        body: Any = None,
        params: dict[str, str] | None = None,
    ) -> ResponseT:
        data = self.send(method, path, body, params=params)
        try:
            return response_model.model_validate(data)
        except SchemaError as e:
            raise SerializationError(f"parse response: {e}") from e

    def search(self, request: SearchRequest) -> SearchResponse:
        """Run a web search (POST /search)."""
        return self._call(SearchResponse, "POST", "/search", to_payload(request))

    def get_contents(self, request: ContentsRequest) -> ContentsResponse:
        """Retrieve page contents by URL or ID (POST /contents)."""
        return self._call(ContentsResponse, "POST", "/contents", to_payload(request))

    def find_similar(self, request: FindSimilarRequest) -> FindSimilarResponse:
        """Find pages similar to a URL (POST /findSimilar)."""
        return self._call(FindSimilarResponse, "POST", "/findSimilar", to_payload(request))

    def answer(self, request: AnswerRequest) -> AnswerResponse:
        """Get a generated answer with citations (POST /answer)."""
        return self._call(AnswerResponse, "POST", "/answer", to_payload(request))

    def answer_stream(
        self,
        request: AnswerRequest,
        on_text: TextCallback | None = None,
        on_done: DoneCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """
        Stream a generated answer.

        Args:
            request: Answer request; ``stream`` is forced on
            on_text: Called with each text delta, in order
            on_done: Called once with the final answer, citations and cost
            cancel_event: Set it to stop delivery and drop the connection
        """
        payload = to_payload(request.model_copy(update={"stream": True}))
        self.send_stream("/answer", payload, on_text, on_done, cancel_event=cancel_event)

    def get_context(self, request: ContextRequest) -> ContextResponse:
        """Retrieve code context (POST /context)."""
        return self._call(ContextResponse, "POST", "/context", to_payload(request))

    def list_api_keys(self) -> APIKeysResponse:
        return self._call(APIKeysResponse, "GET", "/team-management/api-keys")

    def get_usage(self, key_id: str, start_date: str, end_date: str) -> UsageResponse:
        return self._call(
            UsageResponse,
            "GET",
            f"/team-management/api-keys/{quote(key_id, safe='')}/usage",
            params={"startDate": start_date, "endDate": end_date},
        )
