from __future__ import annotations

from typing import Any

import httpx

from fng_trader.errors import SentimentError
from fng_trader.types import SentimentReading

DEFAULT_URL = "https://api.alternative.me/fng/"


def parse_reading(data: Any) -> SentimentReading:
    """Read the latest data point out of an alternative.me `/fng/` body."""
    if not isinstance(data, dict):
        raise SentimentError(f"unexpected fear & greed body: {data!r}")
    points = data.get("data")
    if not isinstance(points, list) or not points:
        raise SentimentError("fear & greed response has no data points")
    latest = points[0]
    if not isinstance(latest, dict) or "value" not in latest:
        raise SentimentError(f"fear & greed data point has no value: {latest!r}")
    try:
        value = int(str(latest["value"]).strip())
    except ValueError:
        raise SentimentError(
            f"fear & greed value is not an integer: {latest['value']!r}"
        ) from None
    if not 0 <= value <= 100:
        raise SentimentError(f"fear & greed value out of range: {value}")

    timestamp: int | None = None
    try:
        timestamp = int(latest["timestamp"])
    except (KeyError, TypeError, ValueError):
        timestamp = None
    return SentimentReading(
        value=value,
        classification=str(latest.get("value_classification", "")),
        timestamp=timestamp,
    )


class FearGreedClient:
    def __init__(
        self,
        *,
        url: str = DEFAULT_URL,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_reading(self) -> SentimentReading:
        resp = await self._client.get(self._url)
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise SentimentError(f"fear & greed response is not JSON: {e}") from e
        return parse_reading(data)

    async def fetch(self) -> int:
        reading = await self.fetch_reading()
        return reading.value
