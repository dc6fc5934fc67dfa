from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Literal

from fng_trader.errors import InvalidOrderRequestError, UnknownTradeTypeError

Side = Literal["BUY", "SELL"]


class TradeType(str, Enum):
    BUY = "BUY"
    # Buy the requested size as-is, without consulting the sentiment index.
    BUY_IGNORE_SENTIMENT = "BUY-IGNORE-FG"
    SELL = "SELL"

    @classmethod
    def parse(cls, raw: TradeType | str) -> TradeType:
        if isinstance(raw, TradeType):
            return raw
        if not isinstance(raw, str):
            raise UnknownTradeTypeError(raw)
        try:
            return cls(raw.strip().upper())
        except ValueError:
            raise UnknownTradeTypeError(raw) from None

    @property
    def side(self) -> Side:
        if self is TradeType.SELL:
            return "SELL"
        return "BUY"

    @property
    def uses_sentiment(self) -> bool:
        return self is TradeType.BUY


@dataclass(frozen=True)
class OrderRequest:
    trade_type: TradeType
    asset_symbol: str
    requested_size: Decimal

    def __post_init__(self) -> None:
        if not self.asset_symbol.strip():
            raise InvalidOrderRequestError("asset_symbol must not be empty")
        if self.requested_size < 0:
            raise InvalidOrderRequestError(
                f"requested_size must be >= 0, got {self.requested_size}"
            )


@dataclass(frozen=True)
class SentimentReading:
    value: int
    classification: str = ""
    timestamp: int | None = None
