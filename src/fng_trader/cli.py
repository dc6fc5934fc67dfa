from __future__ import annotations

import asyncio
import logging
from decimal import Decimal, InvalidOperation

import typer

from fng_trader.engine import Failed
from fng_trader.engine.executor import failure_from_exception
from fng_trader.errors import UnknownTradeTypeError
from fng_trader.handler import build_executor, format_summary
from fng_trader.logging_utils import configure_logging
from fng_trader.sentiment import FearGreedClient
from fng_trader.settings import Settings
from fng_trader.sizing import multiplier_for_score
from fng_trader.types import OrderRequest, TradeType

app = typer.Typer(no_args_is_help=True, add_completion=False)
logger = logging.getLogger("fng_trader")


def _parse_request(*, trade_type: str, coin_symbol: str, order_size: str) -> OrderRequest:
    try:
        kind = TradeType.parse(trade_type)
    except UnknownTradeTypeError as e:
        raise typer.BadParameter(str(e), param_hint="--trade-type") from e
    try:
        size = Decimal(order_size)
    except InvalidOperation as e:
        raise typer.BadParameter(f"not a decimal: {order_size!r}", param_hint="--order-size") from e
    if not size.is_finite() or size < 0:
        raise typer.BadParameter("order size must be >= 0", param_hint="--order-size")
    if not coin_symbol.strip():
        raise typer.BadParameter("coin symbol must not be empty", param_hint="--coin-symbol")
    return OrderRequest(trade_type=kind, asset_symbol=coin_symbol.strip(), requested_size=size)


_TRADE_TYPE_OPTION = typer.Option(..., "--trade-type", help="BUY, BUY-IGNORE-FG or SELL.")
_COIN_SYMBOL_OPTION = typer.Option(..., "--coin-symbol", help="Coinbase product id, e.g. BTC-USD.")
_ORDER_SIZE_OPTION = typer.Option(
    ...,
    "--order-size",
    help="Quote amount to spend (BUY) or base amount to sell (SELL).",
)


@app.command()
def order(
    trade_type: str = _TRADE_TYPE_OPTION,
    coin_symbol: str = _COIN_SYMBOL_OPTION,
    order_size: str = _ORDER_SIZE_OPTION,
) -> None:
    """
    Place one market IOC order on Coinbase and print the raw response.
    """
    settings = Settings()
    configure_logging(settings.log_level)
    request = _parse_request(trade_type=trade_type, coin_symbol=coin_symbol, order_size=order_size)

    async def _run() -> None:
        executor, exchange, sentiment = build_executor(settings)
        try:
            result = await executor.execute(request)
        finally:
            await sentiment.aclose()
            await exchange.aclose()
        logger.info(
            format_summary(
                trade_type=request.trade_type.value,
                order_size=request.requested_size,
                text=result.text,
            )
        )
        typer.echo(result.text)
        if isinstance(result, Failed):
            raise typer.Exit(code=1)

    asyncio.run(_run())


@app.command()
def preview(
    trade_type: str = _TRADE_TYPE_OPTION,
    coin_symbol: str = _COIN_SYMBOL_OPTION,
    order_size: str = _ORDER_SIZE_OPTION,
) -> None:
    """
    Size, build and sign an order without sending it.
    """
    settings = Settings()
    configure_logging(settings.log_level)
    request = _parse_request(trade_type=trade_type, coin_symbol=coin_symbol, order_size=order_size)

    async def _run() -> None:
        executor, exchange, sentiment = build_executor(settings)
        try:
            prepared = await executor.prepare(request)
        except Exception as e:
            failed = failure_from_exception(e)
            typer.echo({"ok": False, "kind": failed.kind.value, "detail": failed.detail})
            raise typer.Exit(code=1) from e
        finally:
            await sentiment.aclose()
            await exchange.aclose()
        signed = prepared.signed
        typer.echo(
            {
                "ok": True,
                "score": prepared.score,
                "amount": str(prepared.amount),
                "path": signed.path,
                "timestamp": signed.timestamp,
                "body": signed.body.decode("utf-8"),
                "signature": signed.signature,
            }
        )

    asyncio.run(_run())


@app.command()
def sentiment() -> None:
    """
    Print the current Fear & Greed index and the BUY multiplier it implies.
    """
    settings = Settings()
    configure_logging(settings.log_level)

    async def _run() -> None:
        client = FearGreedClient(
            url=settings.fear_greed_url,
            timeout_seconds=settings.http_timeout_seconds,
        )
        try:
            reading = await client.fetch_reading()
        finally:
            await client.aclose()
        typer.echo(
            {
                "value": reading.value,
                "classification": reading.classification,
                "multiplier": str(multiplier_for_score(reading.value)),
            }
        )

    asyncio.run(_run())


@app.command()
def show_config() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("loaded_config")
    typer.echo(settings.redacted())
