from decimal import Decimal

import pytest

from fng_trader.errors import InvalidOrderRequestError, UnknownTradeTypeError
from fng_trader.types import OrderRequest, TradeType


def test_trade_type_parse_is_case_insensitive() -> None:
    assert TradeType.parse("buy") is TradeType.BUY
    assert TradeType.parse(" Sell ") is TradeType.SELL
    assert TradeType.parse("buy-ignore-fg") is TradeType.BUY_IGNORE_SENTIMENT
    assert TradeType.parse("BUY-Ignore-FG") is TradeType.BUY_IGNORE_SENTIMENT
    assert TradeType.parse(TradeType.SELL) is TradeType.SELL


@pytest.mark.parametrize("raw", ["HOLD", "", "BUY_IGNORE_FG", 3])
def test_trade_type_parse_rejects_unknown(raw: object) -> None:
    with pytest.raises(UnknownTradeTypeError):
        TradeType.parse(raw)  # type: ignore[arg-type]


def test_trade_type_side_and_sentiment_flag() -> None:
    assert TradeType.BUY.side == "BUY"
    assert TradeType.BUY_IGNORE_SENTIMENT.side == "BUY"
    assert TradeType.SELL.side == "SELL"
    assert TradeType.BUY.uses_sentiment is True
    assert TradeType.BUY_IGNORE_SENTIMENT.uses_sentiment is False
    assert TradeType.SELL.uses_sentiment is False


def test_order_request_validates_fields() -> None:
    with pytest.raises(InvalidOrderRequestError):
        OrderRequest(trade_type=TradeType.BUY, asset_symbol="BTC-USD", requested_size=Decimal("-1"))
    with pytest.raises(InvalidOrderRequestError):
        OrderRequest(trade_type=TradeType.BUY, asset_symbol="  ", requested_size=Decimal("1"))
