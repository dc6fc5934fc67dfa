from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field

from fng_trader.engine import ExecutionResult, OrderExecutor
from fng_trader.engine.executor import failure_from_exception
from fng_trader.errors import ConfigurationError
from fng_trader.exchange import CoinbaseClient
from fng_trader.logging_utils import configure_logging
from fng_trader.sentiment import FearGreedClient
from fng_trader.settings import Settings, load_settings
from fng_trader.types import OrderRequest, TradeType

logger = logging.getLogger("fng_trader.handler")


class OrderEvent(BaseModel):
    model_config = ConfigDict(extra="ignore")

    trade_type: str = Field(alias="tradeType")
    coin_symbol: str = Field(alias="coinSymbol", min_length=1)
    order_size: Decimal = Field(alias="orderSize", ge=0)


def parse_event(event: Mapping[str, Any]) -> OrderRequest:
    parsed = OrderEvent.model_validate(dict(event))
    return OrderRequest(
        trade_type=TradeType.parse(parsed.trade_type),
        asset_symbol=parsed.coin_symbol.strip(),
        requested_size=parsed.order_size,
    )


def format_summary(*, trade_type: object, order_size: object, text: str) -> str:
    return f"\nExecuted: {trade_type} ({order_size}).\nResponse: \n{text}"


def build_executor(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> tuple[OrderExecutor, CoinbaseClient, FearGreedClient]:
    exchange = CoinbaseClient(
        api_key=settings.coinbase_api_key,
        api_secret=settings.coinbase_api_secret,
        base_url=settings.coinbase_base_url,
        order_path=settings.coinbase_order_path,
        timeout_seconds=settings.http_timeout_seconds,
        transport=transport,
    )
    sentiment = FearGreedClient(
        url=settings.fear_greed_url,
        timeout_seconds=settings.http_timeout_seconds,
        transport=transport,
    )
    return OrderExecutor(exchange=exchange, sentiment=sentiment), exchange, sentiment


async def _execute(
    request: OrderRequest,
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None,
) -> ExecutionResult:
    try:
        executor, exchange, sentiment = build_executor(settings, transport=transport)
    except Exception as e:
        failed = failure_from_exception(e)
        logger.exception("executor_setup_failed", extra={"kind": failed.kind.value})
        return failed
    try:
        return await executor.execute(request)
    finally:
        await sentiment.aclose()
        await exchange.aclose()


async def handle_async(
    event: Mapping[str, Any],
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ExecutionResult:
    raw_type = str(event.get("tradeType", "")).upper()
    raw_size = event.get("orderSize")
    try:
        request = parse_event(event)
    except Exception as e:
        result: ExecutionResult = failure_from_exception(e)
        logger.warning("invalid_event", extra={"trade_type": raw_type, "kind": result.kind.value})
    else:
        result = await _execute(request, settings=settings, transport=transport)

    logger.info(format_summary(trade_type=raw_type, order_size=raw_size, text=result.text))
    return result


def handle(
    event: Mapping[str, Any],
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Execute one order described by `event` and return the response text.

    `event` is `{"tradeType": ..., "coinSymbol": ..., "orderSize": ...}`.
    Settings (and so credentials) are read once per call when not given.
    Nothing is raised: configuration, validation and transport problems all
    come back as error text.
    """
    if settings is None:
        try:
            settings = load_settings()
        except ConfigurationError as e:
            failed = failure_from_exception(e)
            logger.error("settings_invalid", extra={"kind": failed.kind.value})
            return failed.text
    result = asyncio.run(handle_async(event, settings=settings, transport=transport))
    return result.text


def lambda_handler(event: Mapping[str, Any], context: object = None) -> str:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging("INFO")
        failed = failure_from_exception(e)
        logger.error("settings_invalid", extra={"kind": failed.kind.value})
        return failed.text
    configure_logging(settings.log_level)
    return handle(event, settings=settings)
