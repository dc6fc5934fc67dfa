"""Sentiment-driven order sizing.

Buys are scaled inversely to market greed: the more fearful the index, the
larger the buy. Scores of 0 and of 80 or above resolve to a zero multiplier,
which effectively blocks the buy.
"""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from fng_trader.errors import InvalidOrderRequestError
from fng_trader.types import TradeType

AMOUNT_QUANTUM = Decimal("0.01")

# (lowest score, highest score, multiplier), both bounds inclusive.
_MULTIPLIER_BANDS: tuple[tuple[int, int, Decimal], ...] = (
    (1, 9, Decimal("3")),
    (10, 20, Decimal("2")),
    (21, 30, Decimal("1.5")),
    (31, 59, Decimal("1")),
    (60, 79, Decimal("0.5")),
)


def multiplier_for_score(score: int) -> Decimal:
    for low, high, multiplier in _MULTIPLIER_BANDS:
        if low <= score <= high:
            return multiplier
    return Decimal("0")


def round_amount(value: Decimal) -> Decimal:
    # Banker's rounding: 0.125 -> 0.12, 0.135 -> 0.14.
    try:
        return value.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        raise InvalidOrderRequestError(
            f"order amount {value} is too large to round to cents"
        ) from None


def compute_amount(
    trade_type: TradeType,
    requested_size: Decimal,
    score: int | None = None,
) -> Decimal:
    """Return the effective order amount for `trade_type`.

    SELL and BUY-IGNORE-FG pass `requested_size` through untouched; `score` is
    ignored for them. A plain BUY needs the current sentiment `score`.
    """
    if not trade_type.uses_sentiment:
        return requested_size
    if score is None:
        raise ValueError("a sentiment score is required to size a BUY order")
    return round_amount(requested_size * multiplier_for_score(score))
