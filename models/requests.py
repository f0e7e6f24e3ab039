"""Pydantic request models and builders for the Exa API endpoints.

Every optional field defaults to None and payloads are dumped with
``exclude_none=True``: the service treats an absent field differently from an
explicitly empty one, so "not specified" must mean "not sent".
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from api.errors import ValidationError

DEFAULT_TEXT_MAX_CHARS = 10000
DEFAULT_SEARCH_TYPE = "auto"
DYNAMIC_TOKENS = "dynamic"

SEARCH_TYPES = ("auto", "fast", "deep", "neural")
CATEGORIES = (
    "company",
    "news",
    "research_paper",
    "tweet",
    "github",
    "linkedin_profile",
    "pdf",
    "personal_site",
)


class WireModel(BaseModel):
    """Base for request bodies: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TextOptions(WireModel):
    max_characters: int | None = None
    include_html_tags: bool | None = None


class HighlightsOptions(WireModel):
    num_sentences: int | None = None
    highlights_per_url: int | None = None
    query: str | None = None


class SummaryOptions(WireModel):
    query: str | None = None


class ContentOptions(WireModel):
    text: TextOptions | None = None
    highlights: HighlightsOptions | None = None
    summary: SummaryOptions | None = None
    livecrawl: Literal["always", "fallback"] | None = None
    subpages: int | None = None
    subpage_target: list[str] | None = None


class SearchRequest(WireModel):
    query: str = Field(..., min_length=1)
    type: str | None = None
    num_results: int | None = None
    category: str | None = None
    include_domains: list[str] | None = None
    exclude_domains: list[str] | None = None
    start_published_date: str | None = None
    end_published_date: str | None = None
    include_text: str | None = None
    exclude_text: str | None = None
    moderation: bool | None = None
    contents: ContentOptions | None = None


class ContentsRequest(WireModel):
    """POST /contents takes the content options at the top level."""

    urls: list[str] | None = None
    ids: list[str] | None = None
    text: TextOptions | None = None
    highlights: HighlightsOptions | None = None
    summary: SummaryOptions | None = None
    livecrawl: Literal["always", "fallback"] | None = None
    subpages: int | None = None


class FindSimilarRequest(WireModel):
    url: str = Field(..., min_length=1)
    num_results: int | None = None
    include_domains: list[str] | None = None
    exclude_domains: list[str] | None = None
    start_published_date: str | None = None
    end_published_date: str | None = None
    exclude_source_domain: bool | None = None
    category: str | None = None
    contents: ContentOptions | None = None


class AnswerRequest(WireModel):
    query: str = Field(..., min_length=1)
    text: bool | None = None
    model: str | None = None
    output_schema: Any | None = None
    stream: bool | None = None


class ContextRequest(WireModel):
    query: str = Field(..., min_length=1)
    tokens_num: int | Literal["dynamic"] = DYNAMIC_TOKENS


def to_payload(request: WireModel) -> dict[str, Any]:
    """Serialize a request model to its wire-format body."""
    return request.model_dump(by_alias=True, exclude_none=True)


def expand_date(value: str | None) -> str | None:
    """Expand ``YYYY-MM-DD`` to midnight UTC (``YYYY-MM-DDT00:00:00.000Z``)."""
    if not value:
        return None
    try:
        day = datetime.strptime(value, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"invalid date {value!r}: expected YYYY-MM-DD") from e
    return day.strftime("%Y-%m-%dT00:00:00.000Z")


def livecrawl_policy(max_age_hours: int | None) -> str | None:
    """
    Translate a max cache age into the service's livecrawl policy.

    Negative (or None) means "use the cache" and the field is omitted; zero
    forces a live fetch; a positive age only falls back to live fetching when
    the cached copy is stale.
    """
    if max_age_hours is None or max_age_hours < 0:
        return None
    if max_age_hours == 0:
        return "always"
    return "fallback"


def build_content_options(
    *,
    text: bool = False,
    text_max_chars: int = DEFAULT_TEXT_MAX_CHARS,
    highlights: bool = False,
    summary: bool = False,
    max_age_hours: int = -1,
    subpages: int = 0,
) -> ContentOptions | None:
    """Group the content sub-options, or None when none was requested."""
    options = ContentOptions()
    requested = False

    if text:
        options.text = TextOptions(max_characters=text_max_chars)
        requested = True
    if highlights:
        options.highlights = HighlightsOptions()
        requested = True
    if summary:
        options.summary = SummaryOptions()
        requested = True
    policy = livecrawl_policy(max_age_hours)
    if policy:
        options.livecrawl = policy
        requested = True
    if subpages > 0:
        options.subpages = subpages
        requested = True

    return options if requested else None


def _non_empty(values: list[str] | None) -> list[str] | None:
    cleaned = [v.strip() for v in values or [] if v and v.strip()]
    return cleaned or None


def build_search_request(
    query: str,
    *,
    num_results: int = 25,
    search_type: str = DEFAULT_SEARCH_TYPE,
    category: str | None = None,
    include_domains: list[str] | None = None,
    exclude_domains: list[str] | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    include_text: str | None = None,
    exclude_text: str | None = None,
    text: bool = False,
    text_max_chars: int = DEFAULT_TEXT_MAX_CHARS,
    highlights: bool = False,
    summary: bool = False,
    no_contents: bool = False,
    max_age_hours: int = -1,
    moderation: bool = False,
    subpages: int = 0,
) -> SearchRequest:
    contents = None
    if not no_contents:
        contents = build_content_options(
            text=text,
            text_max_chars=text_max_chars,
            highlights=highlights,
            summary=summary,
            max_age_hours=max_age_hours,
            subpages=subpages,
        )

    return SearchRequest(
        query=query,
        type=search_type if search_type and search_type != DEFAULT_SEARCH_TYPE else None,
        num_results=num_results if num_results > 0 else None,
        category=category or None,
        include_domains=_non_empty(include_domains),
        exclude_domains=_non_empty(exclude_domains),
        start_published_date=expand_date(start_date),
        end_published_date=expand_date(end_date),
        include_text=include_text or None,
        exclude_text=exclude_text or None,
        moderation=True if moderation else None,
        contents=contents,
    )


def build_contents_request(
    urls: list[str],
    *,
    text: bool = True,
    text_max_chars: int = DEFAULT_TEXT_MAX_CHARS,
    highlights: bool = False,
    summary: bool = False,
    max_age_hours: int = -1,
    subpages: int = 0,
) -> ContentsRequest:
    """Full text is on by default here; ``text=False`` is the explicit opt-out."""
    return ContentsRequest(
        urls=list(urls),
        text=TextOptions(max_characters=text_max_chars) if text else None,
        highlights=HighlightsOptions() if highlights else None,
        summary=SummaryOptions() if summary else None,
        livecrawl=livecrawl_policy(max_age_hours),
        subpages=subpages if subpages > 0 else None,
    )


def build_similar_request(
    url: str,
    *,
    num_results: int = 10,
    exclude_source: bool = False,
    include_domains: list[str] | None = None,
    exclude_domains: list[str] | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    text: bool = False,
    highlights: bool = False,
    category: str | None = None,
) -> FindSimilarRequest:
    return FindSimilarRequest(
        url=url,
        num_results=num_results if num_results > 0 else None,
        exclude_source_domain=True if exclude_source else None,
        include_domains=_non_empty(include_domains),
        exclude_domains=_non_empty(exclude_domains),
        start_published_date=expand_date(start_date),
        end_published_date=expand_date(end_date),
        category=category or None,
        contents=build_content_options(text=text, highlights=highlights),
    )


def load_output_schema(path: str) -> Any:
    """Read a JSON schema file for structured answers."""
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ValidationError(f"read schema file: {e}") from e
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValidationError(f"parse schema: {e}") from e


def build_answer_request(
    query: str,
    *,
    text: bool = False,
    model: str | None = None,
    output_schema_path: str | None = None,
) -> AnswerRequest:
    return AnswerRequest(
        query=query,
        text=True if text else None,
        model=model or None,
        output_schema=load_output_schema(output_schema_path) if output_schema_path else None,
    )


def build_context_request(query: str, *, tokens: int = 0) -> ContextRequest:
    """Positive token counts are sent as-is; zero or less means "dynamic"."""
    return ContextRequest(query=query, tokens_num=tokens if tokens > 0 else DYNAMIC_TOKENS)
