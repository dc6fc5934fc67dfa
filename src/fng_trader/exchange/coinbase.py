from __future__ import annotations

import hmac
from dataclasses import dataclass
from hashlib import sha256

import httpx

from fng_trader.errors import MissingCredentialsError
from fng_trader.orders import OrderPayload

DEFAULT_BASE_URL = "https://api.coinbase.com"
DEFAULT_ORDER_PATH = "/api/v3/brokerage/orders"
_DEFAULT_TIMEOUT_SECONDS = 5.0


def build_prehash(timestamp: int, method: str, path: str, body: bytes | str) -> bytes:
    # No separators: Coinbase recomputes exactly timestamp + method + path + body.
    head = f"{timestamp}{method}{path}".encode("utf-8")
    if isinstance(body, str):
        body = body.encode("utf-8")
    return head + body


def sign_message(
    timestamp: int,
    method: str,
    path: str,
    body: bytes | str,
    secret: str,
) -> str:
    prehash = build_prehash(timestamp, method, path, body)
    mac = hmac.new(secret.encode("utf-8"), prehash, sha256)
    return mac.hexdigest()


@dataclass(frozen=True)
class SignedRequest:
    timestamp: int
    method: str
    path: str
    body: bytes
    signature: str

    def headers(self, api_key: str) -> dict[str, str]:
        return {
            "accept": "application/json",
            "content-type": "application/json",
            "CB-ACCESS-KEY": api_key,
            "CB-ACCESS-SIGN": self.signature,
            "CB-ACCESS-TIMESTAMP": str(self.timestamp),
        }


@dataclass(frozen=True)
class OrderResponse:
    status_code: int
    text: str


class CoinbaseClient:
    def __init__(
        self,
        *,
        api_key: str,
        api_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        order_path: str = DEFAULT_ORDER_PATH,
        timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self._base_url = base_url.rstrip("/")
        self._order_path = order_path
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout_seconds),
            transport=transport,
        )

    @property
    def order_path(self) -> str:
        return self._order_path

    async def aclose(self) -> None:
        await self._client.aclose()

    def sign(self, payload: OrderPayload, *, timestamp: int) -> SignedRequest:
        self.require_credentials()
        body = payload.to_json_bytes()
        signature = sign_message(timestamp, "POST", self._order_path, body, self._api_secret)
        return SignedRequest(
            timestamp=timestamp,
            method="POST",
            path=self._order_path,
            body=body,
            signature=signature,
        )

    async def send(self, signed: SignedRequest) -> OrderResponse:
        """POST the signed body once; exchange-side errors come back as a response."""
        self.require_credentials()
        response = await self._client.request(
            signed.method,
            signed.path,
            content=signed.body,
            headers=signed.headers(self._api_key),
        )
        return OrderResponse(status_code=response.status_code, text=response.text)

    async def create_order(self, payload: OrderPayload, *, timestamp: int) -> OrderResponse:
        return await self.send(self.sign(payload, timestamp=timestamp))

    def require_credentials(self) -> None:
        if not self._api_key.strip():
            raise MissingCredentialsError("COINBASE_API_KEY is required for signed endpoints")
        if not self._api_secret.strip():
            raise MissingCredentialsError("COINBASE_API_SECRET is required for signed endpoints")
