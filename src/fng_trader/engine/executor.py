from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

import httpx
from pydantic import ValidationError

from fng_trader.errors import (
    ConfigurationError,
    InvalidOrderRequestError,
    MissingCredentialsError,
    SentimentError,
    UnknownTradeTypeError,
)
from fng_trader.exchange import CoinbaseClient, SignedRequest
from fng_trader.orders import OrderPayload, build_payload, new_client_order_id
from fng_trader.sentiment import FearGreedClient
from fng_trader.sizing import compute_amount
from fng_trader.types import OrderRequest

logger = logging.getLogger("fng_trader.executor")


class FailureKind(str, Enum):
    TRANSPORT = "transport"
    SENTIMENT = "sentiment"
    INVALID_TRADE_TYPE = "invalid_trade_type"
    INVALID_REQUEST = "invalid_request"
    MISSING_CREDENTIALS = "missing_credentials"
    CONFIGURATION = "configuration"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class PreparedOrder:
    request: OrderRequest
    score: int | None
    amount: Decimal
    payload: OrderPayload
    signed: SignedRequest


@dataclass(frozen=True)
class Submitted:
    """The exchange answered; `body` may still be a rejection."""

    status_code: int
    body: str
    prepared: PreparedOrder

    @property
    def text(self) -> str:
        return self.body

    @property
    def accepted(self) -> bool:
        if self.status_code >= 400:
            return False
        try:
            data = json.loads(self.body)
        except ValueError:
            return False
        return isinstance(data, dict) and data.get("success") is True


@dataclass(frozen=True)
class Failed:
    """The order could not be sent, or no response was received."""

    kind: FailureKind
    detail: str

    @property
    def text(self) -> str:
        return self.detail

    @property
    def accepted(self) -> bool:
        return False


ExecutionResult = Submitted | Failed


def classify_exception(error: Exception) -> FailureKind:
    if isinstance(error, ConfigurationError):
        return FailureKind.CONFIGURATION
    if isinstance(error, MissingCredentialsError):
        return FailureKind.MISSING_CREDENTIALS
    if isinstance(error, UnknownTradeTypeError):
        return FailureKind.INVALID_TRADE_TYPE
    if isinstance(error, (InvalidOrderRequestError, ValidationError)):
        return FailureKind.INVALID_REQUEST
    if isinstance(error, SentimentError):
        return FailureKind.SENTIMENT
    if isinstance(error, httpx.HTTPError):
        return FailureKind.TRANSPORT
    return FailureKind.UNEXPECTED


def failure_from_exception(error: Exception) -> Failed:
    return Failed(kind=classify_exception(error), detail=str(error) or type(error).__name__)


class OrderExecutor:
    def __init__(
        self,
        *,
        exchange: CoinbaseClient,
        sentiment: FearGreedClient,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = new_client_order_id,
    ) -> None:
        self._exchange = exchange
        self._sentiment = sentiment
        self._clock = clock
        self._id_factory = id_factory

    async def prepare(self, request: OrderRequest) -> PreparedOrder:
        """Size, build and sign `request` without sending it."""
        self._exchange.require_credentials()
        # Captured once; the same value goes into the signature and the header.
        timestamp = int(self._clock())
        trade_type = request.trade_type
        symbol = request.asset_symbol

        score: int | None = None
        if trade_type.uses_sentiment:
            score = await self._sentiment.fetch()
            logger.info("sentiment_fetched", extra={"product_id": symbol, "score": score})

        amount = compute_amount(trade_type, request.requested_size, score)
        logger.info(
            "order_sized",
            extra={
                "product_id": symbol,
                "trade_type": trade_type.value,
                "score": score,
                "amount": str(amount),
            },
        )
        if trade_type.uses_sentiment and amount <= 0:
            logger.warning(
                "zero_buy_amount",
                extra={"product_id": symbol, "score": score, "amount": str(amount)},
            )

        payload = build_payload(trade_type, symbol, amount, client_order_id=self._id_factory())
        signed = self._exchange.sign(payload, timestamp=timestamp)
        return PreparedOrder(
            request=request,
            score=score,
            amount=amount,
            payload=payload,
            signed=signed,
        )

    async def execute(self, request: OrderRequest) -> ExecutionResult:
        """Run the whole sequence once; exceptions become a `Failed` result."""
        try:
            prepared = await self.prepare(request)
            response = await self._exchange.send(prepared.signed)
        except Exception as e:
            failed = failure_from_exception(e)
            logger.exception(
                "order_failed",
                extra={
                    "product_id": request.asset_symbol,
                    "trade_type": request.trade_type.value,
                    "kind": failed.kind.value,
                },
            )
            return failed

        result = Submitted(
            status_code=response.status_code,
            body=response.text,
            prepared=prepared,
        )
        logger.info(
            "order_submitted",
            extra={
                "product_id": request.asset_symbol,
                "trade_type": request.trade_type.value,
                "client_order_id": prepared.payload.client_order_id,
                "status_code": response.status_code,
            },
        )
        return result
