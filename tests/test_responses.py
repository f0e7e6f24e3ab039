import pytest

from models.responses import (
    AnswerResponse,
    ContextResponse,
    SearchResponse,
    UsageEntry,
    UsageResponse,
    UsageSummary,
    to_output,
)


def test_usage_summary_totals():
    entries = [
        UsageEntry(date="2025-01-01", request_count=3, credit_usage=1.5),
        UsageEntry(date="2025-01-02", request_count=2, credit_usage=0.5),
    ]
    summary = UsageSummary.from_entries(entries)
    assert summary.total_requests == 5
    assert summary.total_credits == pytest.approx(2.0)
    assert [e.request_count for e in entries] == [3, 2]


def test_usage_summary_empty():
    assert UsageSummary.from_entries([]) == UsageSummary(total_requests=0, total_credits=0)


def test_usage_response_from_wire():
    response = UsageResponse.model_validate(
        {"usage": [{"date": "2025-01-01", "requestCount": 3, "creditUsage": 1.5}]}
    )
    assert response.usage[0].credit_usage == 1.5


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"total": 0.25}, 0.25),
        ('{"total": 0.5, "search": {"amount": 0.1}}', 0.5),
        ("not json", None),
        ('"just a string"', None),
        (None, None),
        (42, None),
        ({"total": "lots"}, None),
    ],
)
def test_context_cost_two_stage_decode(raw, expected):
    response = ContextResponse.model_validate({"response": "ctx", "costDollars": raw})
    cost = response.cost
    if expected is None:
        assert cost is None
    else:
        assert cost.total == pytest.approx(expected)


def test_context_cost_is_memoized():
    response = ContextResponse.model_validate({"response": "ctx", "costDollars": {"total": 1.0}})
    assert response.cost is response.cost


def test_to_output_uses_wire_names_and_drops_missing_fields():
    response = SearchResponse.model_validate(
        {
            "requestId": "r1",
            "results": [{"title": "A", "url": "u1", "publishedDate": "2025-01-01T00:00:00Z"}],
            "searchTime": 12.5,
        }
    )
    assert to_output(response) == {
        "requestId": "r1",
        "results": [{"title": "A", "url": "u1", "publishedDate": "2025-01-01T00:00:00Z"}],
        "searchTime": 12.5,
    }


def test_result_order_is_preserved():
    response = SearchResponse.model_validate(
        {"results": [{"url": "b", "score": 0.1}, {"url": "a", "score": 0.9}]}
    )
    assert [r.url for r in response.results] == ["b", "a"]


def test_answer_response_structured_answer():
    response = AnswerResponse.model_validate({"answer": {"capital": "Paris"}, "citations": []})
    assert response.answer == {"capital": "Paris"}


def test_failed_context_cost_decode_is_memoized():
    response = ContextResponse.model_validate({"response": "ctx", "costDollars": "not json"})
    assert response.cost is None

    response.cost_dollars = {"total": 1.0}
    assert response.cost is None
