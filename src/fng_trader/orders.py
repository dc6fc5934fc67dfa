from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from fng_trader.types import Side, TradeType


def format_amount(value: Decimal) -> str:
    return format(value, "f")


@dataclass(frozen=True)
class OrderPayload:
    client_order_id: str
    product_id: str
    side: Side
    # Market IOC orders carry exactly one of these.
    # `quote_size` spends quote currency (BUY), `base_size` sells the asset (SELL).
    quote_size: Decimal | None = None
    base_size: Decimal | None = None

    def __post_init__(self) -> None:
        if (self.quote_size is None) == (self.base_size is None):
            raise ValueError("exactly one of quote_size or base_size must be provided")

    def sizing_field(self) -> tuple[str, str]:
        if self.base_size is not None:
            return "base_size", format_amount(self.base_size)
        if self.quote_size is not None:
            return "quote_size", format_amount(self.quote_size)
        raise ValueError("order payload has no size")

    def to_dict(self) -> dict[str, Any]:
        name, value = self.sizing_field()
        return {
            "client_order_id": self.client_order_id,
            "product_id": self.product_id,
            "side": self.side,
            "order_configuration": {"market_market_ioc": {name: value}},
        }

    def to_json_bytes(self) -> bytes:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False).encode(
            "utf-8"
        )


def new_client_order_id() -> str:
    return str(uuid.uuid4())


def build_payload(
    trade_type: TradeType | str,
    asset_symbol: str,
    amount: Decimal,
    *,
    client_order_id: str | None = None,
) -> OrderPayload:
    kind = TradeType.parse(trade_type)
    order_id = client_order_id or new_client_order_id()
    if kind is TradeType.SELL:
        return OrderPayload(
            client_order_id=order_id,
            product_id=asset_symbol,
            side=kind.side,
            base_size=amount,
        )
    return OrderPayload(
        client_order_id=order_id,
        product_id=asset_symbol,
        side=kind.side,
        quote_size=amount,
    )
