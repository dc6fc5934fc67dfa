import asyncio
from typing import Any

import httpx
import pytest

from fng_trader.errors import SentimentError
from fng_trader.sentiment.fear_greed import FearGreedClient, parse_reading


def _fng_body(value: Any = "25") -> dict[str, Any]:
    return {
        "name": "Fear and Greed Index",
        "data": [
            {
                "value": value,
                "value_classification": "Extreme Fear",
                "timestamp": "1700000000",
                "time_until_update": "3600",
            }
        ],
        "metadata": {"error": None},
    }


def test_parse_reading_extracts_first_data_point() -> None:
    reading = parse_reading(_fng_body("7"))
    assert reading.value == 7
    assert reading.classification == "Extreme Fear"
    assert reading.timestamp == 1700000000


def test_parse_reading_tolerates_missing_optional_fields() -> None:
    reading = parse_reading({"data": [{"value": 61}]})
    assert reading.value == 61
    assert reading.classification == ""
    assert reading.timestamp is None


@pytest.mark.parametrize(
    "body",
    [
        [],
        {},
        {"data": []},
        {"data": "nope"},
        {"data": [{}]},
        {"data": [{"value": "greedy"}]},
        {"data": [{"value": "45.5"}]},
        {"data": [{"value": "101"}]},
        {"data": [{"value": "-1"}]},
    ],
)
def test_parse_reading_rejects_malformed_bodies(body: Any) -> None:
    with pytest.raises(SentimentError):
        parse_reading(body)


def test_fetch_returns_integer_score() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        assert request.method == "GET"
        assert "authorization" not in request.headers
        return httpx.Response(200, json=_fng_body("45"))

    client = FearGreedClient(transport=httpx.MockTransport(handler))
    try:
        score = asyncio.run(client.fetch())
    finally:
        asyncio.run(client.aclose())

    assert score == 45
    assert calls["n"] == 1


def test_fetch_does_not_retry_server_errors() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(503, text="unavailable")

    client = FearGreedClient(transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(client.fetch())
    finally:
        asyncio.run(client.aclose())

    assert calls["n"] == 1


def test_fetch_rejects_non_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    client = FearGreedClient(transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(SentimentError):
            asyncio.run(client.fetch())
    finally:
        asyncio.run(client.aclose())
