__all__ = ["CoinbaseClient", "OrderResponse", "SignedRequest", "build_prehash", "sign_message"]

from fng_trader.exchange.coinbase import (
    CoinbaseClient,
    OrderResponse,
    SignedRequest,
    build_prehash,
    sign_message,
)
