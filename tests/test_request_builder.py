import json

import pytest

from api.errors import ValidationError
from models.requests import (
    build_answer_request,
    build_contents_request,
    build_context_request,
    build_search_request,
    build_similar_request,
    expand_date,
    livecrawl_policy,
    to_payload,
)


@pytest.mark.parametrize(
    "max_age, expected",
    [(0, "always"), (5, "fallback"), (1, "fallback"), (-1, None), (-24, None)],
)
def test_livecrawl_policy(max_age, expected):
    assert livecrawl_policy(max_age) == expected


def test_freshness_zero_serializes_always():
    payload = to_payload(build_search_request("q", max_age_hours=0))
    assert payload["contents"] == {"livecrawl": "always"}


def test_freshness_positive_serializes_fallback():
    payload = to_payload(build_search_request("q", max_age_hours=5))
    assert payload["contents"]["livecrawl"] == "fallback"


def test_freshness_negative_omits_field_entirely():
    payload = to_payload(build_search_request("q", max_age_hours=-1, text=True))
    assert "livecrawl" not in payload["contents"]


def test_no_content_options_omits_contents():
    payload = to_payload(build_search_request("hottest AI startups"))
    assert "contents" not in payload
    assert payload == {"query": "hottest AI startups", "numResults": 25}


def test_search_defaults_are_not_sent():
    payload = to_payload(build_search_request("q", search_type="auto", category="", include_domains=[]))
    assert "type" not in payload
    assert "category" not in payload
    assert "includeDomains" not in payload
    assert "moderation" not in payload
    assert None not in payload.values()


def test_search_full_payload():
    request = build_search_request(
        "climate",
        num_results=5,
        search_type="deep",
        category="news",
        include_domains=["go.dev", " gobyexample.com "],
        exclude_domains=["spam.com"],
        start_date="2025-01-01",
        end_date="2025-02-01",
        include_text="carbon",
        exclude_text="ads",
        text=True,
        text_max_chars=500,
        highlights=True,
        summary=True,
        moderation=True,
        subpages=2,
    )
    assert to_payload(request) == {
        "query": "climate",
        "type": "deep",
        "numResults": 5,
        "category": "news",
        "includeDomains": ["go.dev", "gobyexample.com"],
        "excludeDomains": ["spam.com"],
        "startPublishedDate": "2025-01-01T00:00:00.000Z",
        "endPublishedDate": "2025-02-01T00:00:00.000Z",
        "includeText": "carbon",
        "excludeText": "ads",
        "moderation": True,
        "contents": {
            "text": {"maxCharacters": 500},
            "highlights": {},
            "summary": {},
            "subpages": 2,
        },
    }


def test_no_contents_flag_wins_over_sub_options():
    payload = to_payload(build_search_request("q", text=True, highlights=True, no_contents=True))
    assert "contents" not in payload


def test_expand_date():
    assert expand_date("2025-01-31") == "2025-01-31T00:00:00.000Z"
    assert expand_date("") is None
    assert expand_date(None) is None


@pytest.mark.parametrize("bad", ["2025-13-01", "01/02/2025", "yesterday"])
def test_expand_date_rejects_malformed_input(bad):
    with pytest.raises(ValidationError):
        expand_date(bad)


def test_contents_request_text_on_by_default():
    payload = to_payload(build_contents_request(["https://example.com"]))
    assert payload == {"urls": ["https://example.com"], "text": {"maxCharacters": 10000}}


def test_contents_request_no_text_opt_out():
    payload = to_payload(build_contents_request(["https://example.com"], text=False, summary=True))
    assert "text" not in payload
    assert payload["summary"] == {}


def test_contents_request_livecrawl_and_subpages():
    payload = to_payload(build_contents_request(["u"], max_age_hours=0, subpages=3))
    assert payload["livecrawl"] == "always"
    assert payload["subpages"] == 3


def test_similar_request():
    payload = to_payload(
        build_similar_request("https://arxiv.org/abs/1", exclude_source=True, highlights=True)
    )
    assert payload == {
        "url": "https://arxiv.org/abs/1",
        "numResults": 10,
        "excludeSourceDomain": True,
        "contents": {"highlights": {}},
    }


def test_similar_request_without_content_options():
    payload = to_payload(build_similar_request("https://example.com"))
    assert "contents" not in payload
    assert "excludeSourceDomain" not in payload


@pytest.mark.parametrize("tokens, expected", [(0, "dynamic"), (-5, "dynamic"), (5000, 5000)])
def test_context_token_sentinel(tokens, expected):
    payload = to_payload(build_context_request("React hooks", tokens=tokens))
    assert payload == {"query": "React hooks", "tokensNum": expected}


def test_answer_request_reads_schema(tmp_path):
    schema_file = tmp_path / "schema.json"
    schema_file.write_text(json.dumps({"type": "object"}))
    payload = to_payload(build_answer_request("q", text=True, output_schema_path=str(schema_file)))
    assert payload == {"query": "q", "text": True, "outputSchema": {"type": "object"}}


def test_answer_request_minimal():
    assert to_payload(build_answer_request("q")) == {"query": "q"}


def test_answer_request_missing_schema_file(tmp_path):
    with pytest.raises(ValidationError, match="read schema file"):
        build_answer_request("q", output_schema_path=str(tmp_path / "missing.json"))


def test_answer_request_malformed_schema(tmp_path):
    schema_file = tmp_path / "schema.json"
    schema_file.write_text("{not json")
    with pytest.raises(ValidationError, match="parse schema"):
        build_answer_request("q", output_schema_path=str(schema_file))
