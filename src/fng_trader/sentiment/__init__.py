__all__ = ["FearGreedClient"]

from fng_trader.sentiment.fear_greed import FearGreedClient
