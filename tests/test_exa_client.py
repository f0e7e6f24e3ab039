import json
import logging
import threading

import httpx
import pytest

from api.errors import SerializationError, TransportError
from models.requests import build_answer_request, build_context_request, build_search_request
from tests.conftest import TEST_KEY, data_line, json_response, sse_body


def test_search_sends_headers_and_body(make_client):
    seen = {}

    def handler(request: httpx.Request):
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        seen["timeout"] = request.extensions.get("timeout")
        return json_response({"results": [{"title": "A", "url": "u1", "score": 0.9}]})

    client = make_client(handler)
    response = client.search(build_search_request("hottest AI startups", num_results=3))

    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.test.local/search"
    assert seen["headers"]["x-api-key"] == TEST_KEY
    assert seen["headers"]["user-agent"] == "exa-cli/9.9.9"
    assert seen["headers"]["content-type"] == "application/json"
    assert seen["body"] == {"query": "hottest AI startups", "numResults": 3}
    assert seen["timeout"]["read"] == 60.0
    assert response.results[0].title == "A"


def test_non_2xx_raises_tagged_transport_error(make_client):
    client = make_client(lambda request: httpx.Response(401, text="unauthorized"))

    with pytest.raises(TransportError) as exc_info:
        client.search(build_search_request("q"))

    assert exc_info.value.status_code == 401
    assert str(exc_info.value) == "API error (status 401): unauthorized"


def test_error_body_is_truncated(make_client):
    client = make_client(lambda request: httpx.Response(500, text="x" * 900))

    with pytest.raises(TransportError) as exc_info:
        client.search(build_search_request("q"))

    assert exc_info.value.body == "x" * 500 + "..."


def test_connection_failure_is_network_transport_error(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(TransportError) as exc_info:
        client.search(build_search_request("q"))

    assert exc_info.value.status_code is None
    assert str(exc_info.value).startswith("request failed:")


def test_unparseable_response_is_serialization_error(make_client):
    client = make_client(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(SerializationError, match="parse response"):
        client.search(build_search_request("q"))


def test_unencodable_body_is_serialization_error(make_client):
    client = make_client(lambda request: json_response({}))

    with pytest.raises(SerializationError, match="marshal request"):
        client.send("POST", "/search", {"query": object()})


def test_usage_query_params(make_client):
    seen = {}

    def handler(request):
        seen["raw_path"] = request.url.raw_path
        seen["params"] = dict(request.url.params)
        seen["method"] = request.method
        return json_response({"usage": [{"date": "2025-01-01", "requestCount": 3, "creditUsage": 1.5}]})

    client = make_client(handler)
    response = client.get_usage("key/1", "2025-01-01", "2025-01-31")

    assert seen["method"] == "GET"
    assert seen["raw_path"].startswith(b"/team-management/api-keys/key%2F1/usage")
    assert seen["params"] == {"startDate": "2025-01-01", "endDate": "2025-01-31"}
    assert response.usage[0].request_count == 3


def test_context_response_with_string_cost(make_client):
    client = make_client(
        lambda request: json_response({"response": "ctx", "costDollars": '{"total": 0.012}'})
    )
    response = client.get_context(build_context_request("q"))
    assert response.context == "ctx"
    assert response.cost.total == pytest.approx(0.012)


def test_debug_trace_truncates_and_redacts(make_client, caplog):
    trace_logger = logging.getLogger("tests.trace")
    caplog.set_level(logging.DEBUG, logger="tests.trace")
    long_text = "y" * 5000

    client = make_client(
        lambda request: json_response({"results": [], "echo": TEST_KEY, "blob": long_text}),
        logger=trace_logger,
    )
    client.search(build_search_request("q"))

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("POST https://api.test.local/search body=") for m in messages)
    assert "Response status: 200" in messages
    assert all(TEST_KEY not in m for m in messages)
    body_line = next(m for m in messages if m.startswith("Response body: "))
    assert len(body_line) <= len("Response body: ") + 2000 + 3


def test_no_trace_without_logger(make_client, caplog):
    caplog.set_level(logging.DEBUG)
    client = make_client(lambda request: json_response({"results": []}))
    client.search(build_search_request("q"))
    assert not [r for r in caplog.records if "Response status" in r.getMessage()]


def test_answer_stream_delivers_deltas_and_final(make_client):
    seen = {}

    def handler(request):
        seen["accept"] = request.headers["accept"]
        seen["body"] = json.loads(request.content)
        seen["timeout"] = request.extensions.get("timeout")
        body = sse_body(
            data_line({"text": "Paris "}),
            "",
            data_line({"text": "is the capital."}),
            data_line(
                {
                    "answer": "Paris is the capital.",
                    "citations": [{"title": "Wiki", "url": "https://w"}],
                    "costDollars": {"total": 0.005},
                }
            ),
            "data: [DONE]",
        )
        return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

    client = make_client(handler)
    deltas, finals = [], []
    client.answer_stream(build_answer_request("capital of France"), deltas.append, finals.append)

    assert seen["accept"] == "text/event-stream"
    assert seen["body"] == {"query": "capital of France", "stream": True}
    assert seen["timeout"]["read"] is None
    assert "".join(deltas) == "Paris is the capital."
    assert len(finals) == 1
    assert finals[0].answer == "".join(deltas)
    assert finals[0].citations[0].url == "https://w"
    assert finals[0].cost_dollars.total == pytest.approx(0.005)


def test_answer_stream_checks_status_before_streaming(make_client):
    client = make_client(lambda request: httpx.Response(429, text="slow down"))
    deltas = []

    with pytest.raises(TransportError) as exc_info:
        client.answer_stream(build_answer_request("q"), deltas.append)

    assert exc_info.value.status_code == 429
    assert deltas == []


def test_answer_stream_cancel_stops_callbacks(make_client):
    cancel = threading.Event()
    body = sse_body(
        data_line({"text": "one"}),
        data_line({"text": "two"}),
        data_line({"answer": "onetwo", "citations": []}),
    )
    client = make_client(lambda request: httpx.Response(200, content=body))
    deltas, finals = [], []

    def on_text(text):
        deltas.append(text)
        cancel.set()

    client.answer_stream(build_answer_request("q"), on_text, finals.append, cancel_event=cancel)

    assert deltas == ["one"]
    assert finals == []


def test_cancel_without_active_stream_does_not_affect_later_streams(make_client):
    body = sse_body(data_line({"text": "hello"}), "data: [DONE]")
    client = make_client(lambda request: httpx.Response(200, content=body))
    client.cancel()

    deltas = []
    client.answer_stream(build_answer_request("q"), on_text=deltas.append)

    assert deltas == ["hello"]


def test_cancelled_stream_does_not_carry_over(make_client):
    body = sse_body(data_line({"text": "one"}), data_line({"text": "two"}), "data: [DONE]")
    client = make_client(lambda request: httpx.Response(200, content=body))
    cancel = threading.Event()
    first = []

    def on_text(text):
        first.append(text)
        cancel.set()

    client.answer_stream(build_answer_request("q"), on_text, cancel_event=cancel)
    second = []
    client.answer_stream(build_answer_request("q"), second.append)

    assert first == ["one"]
    assert second == ["one", "two"]
