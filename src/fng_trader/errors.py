from __future__ import annotations


class FngTraderError(RuntimeError):
    pass


class SentimentError(FngTraderError):
    """The sentiment index responded with a body we cannot read a score from."""


class UnknownTradeTypeError(FngTraderError, ValueError):
    def __init__(self, raw: object):
        super().__init__(f"unknown trade type: {raw!r} (expected BUY, BUY-IGNORE-FG or SELL)")
        self.raw = raw


class InvalidOrderRequestError(FngTraderError, ValueError):
    pass


class MissingCredentialsError(FngTraderError):
    pass


class ConfigurationError(FngTraderError):
    pass
