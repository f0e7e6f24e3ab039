"""Pydantic response models for the Exa API.

Unknown fields are kept (``extra="allow"``) so ``--json`` output shows
everything the service returned, not just what the tables use.
"""

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic import ValidationError as SchemaError
from pydantic.alias_generators import to_camel


class ResponseModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Subpage(ResponseModel):
    url: str = ""
    text: str | None = None


class SearchResult(ResponseModel):
    title: str | None = None
    url: str = ""
    id: str | None = None
    published_date: str | None = None
    author: str | None = None
    score: float | None = None
    image: str | None = None
    favicon: str | None = None
    text: str | None = None
    highlights: list[str] | None = None
    highlight_scores: list[float] | None = None
    summary: str | None = None
    subpages: list[Subpage] | None = None


class CostBreakdown(ResponseModel):
    amount: float = 0.0


class CostInfo(ResponseModel):
    total: float = 0.0
    search: CostBreakdown | None = None
    contents: CostBreakdown | None = None
    neural: CostBreakdown | None = None


class SearchResponse(ResponseModel):
    request_id: str | None = None
    resolved_search_type: str | None = None
    results: list[SearchResult] = Field(default_factory=list)
    autoprompt_string: str | None = None
    cost_dollars: CostInfo | None = None


class ContentsResponse(ResponseModel):
    request_id: str | None = None
    results: list[SearchResult] = Field(default_factory=list)
    cost_dollars: CostInfo | None = None


class FindSimilarResponse(ResponseModel):
    request_id: str | None = None
    results: list[SearchResult] = Field(default_factory=list)
    autoprompt_string: str | None = None
    cost_dollars: CostInfo | None = None


class AnswerResponse(ResponseModel):
    request_id: str | None = None
    answer: Any = ""
    citations: list[SearchResult] = Field(default_factory=list)
    cost_dollars: CostInfo | None = None


class StreamEvent(ResponseModel):
    """
    One decoded SSE payload.

    A text-delta carries ``text``; the terminal event carries ``citations``
    (plus the full ``answer`` and ``costDollars``). Anything else is a no-op.
    """

    type: str | None = None
    text: str | None = None
    answer: Any = None
    citations: list[SearchResult] | None = None
    cost_dollars: CostInfo | None = None

    @property
    def is_text_delta(self) -> bool:
        return bool(self.text)

    @property
    def is_terminal(self) -> bool:
        return self.citations is not None

    def to_answer(self) -> AnswerResponse:
        return AnswerResponse(
            answer=self.answer if self.answer is not None else "",
            citations=self.citations or [],
            cost_dollars=self.cost_dollars,
        )


class ContextResponse(ResponseModel):
    request_id: str | None = None
    query: str | None = None
    context: str = Field("", alias="response")
    cost_dollars: Any = None
    results_count: int | None = None
    search_time: float | None = None
    output_tokens: int | None = None

    _parsed_cost: CostInfo | None = PrivateAttr(default=None)
    _cost_decoded: bool = PrivateAttr(default=False)

    @property
    def cost(self) -> CostInfo | None:
        """
        Decode ``costDollars``, which arrives either as an object or as a
        string holding a JSON-encoded object. Returns None when neither works.
        """
        if not self._cost_decoded:
            self._parsed_cost = self._decode_cost()
            self._cost_decoded = True
        return self._parsed_cost

    def _decode_cost(self) -> CostInfo | None:
        raw = self.cost_dollars
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except json.JSONDecodeError:
                return None
        if not isinstance(raw, dict):
            return None
        try:
            return CostInfo.model_validate(raw)
        except SchemaError:
            return None


class UsageEntry(ResponseModel):
    date: str = ""
    request_count: int = 0
    credit_usage: float = 0.0


class UsageResponse(ResponseModel):
    usage: list[UsageEntry] = Field(default_factory=list)


class APIKeyInfo(ResponseModel):
    id: str
    name: str | None = None


class APIKeysResponse(ResponseModel):
    api_keys: list[APIKeyInfo] = Field(default_factory=list)


@dataclass(frozen=True)
class UsageSummary:
    total_requests: int
    total_credits: float

    @classmethod
    def from_entries(cls, entries: list[UsageEntry]) -> "UsageSummary":
        return cls(
            total_requests=sum(e.request_count for e in entries),
            total_credits=sum(e.credit_usage for e in entries),
        )


def to_output(model: BaseModel) -> Any:
    """Plain JSON-compatible document for rendering, keyed by wire names."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)
