from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

import httpx

from ..core.errors import RateUnavailableError
from ..core.pricing import ONE_ETH_IN_WEI

logger = logging.getLogger(__name__)


class TokenConverter(Protocol):
    async def market_eth_to_mana(self, eth_amount: int | str | Decimal) -> int:
        """Return ``eth_amount`` ETH expressed in MANA wei."""
        ...


class RatesClient:
    """Spot ETH to MANA conversion crossed through a common quote currency."""

    def __init__(
        self,
        base_url: str,
        *,
        native_id: str = "ethereum",
        reference_id: str = "decentraland",
        vs_currency: str = "usd",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._native_id = native_id
        self._reference_id = reference_id
        self._vs_currency = vs_currency
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _price(self, payload: dict[str, Any], asset_id: str) -> Decimal:
        raw = (payload.get(asset_id) or {}).get(self._vs_currency)
        try:
            price = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise RateUnavailableError(f"No {self._vs_currency} price for {asset_id}") from None
        if not price.is_finite() or price <= 0:
            raise RateUnavailableError(f"Invalid {self._vs_currency} price for {asset_id}: {raw}")
        return price

    async def market_eth_to_mana(self, eth_amount: int | str | Decimal) -> int:
        params = {
            "ids": f"{self._native_id},{self._reference_id}",
            "vs_currencies": self._vs_currency,
        }
        response = await self._client.get(f"{self._base_url}/simple/price", params=params)
        response.raise_for_status()
        payload = response.json()

        native_price = self._price(payload, self._native_id)
        reference_price = self._price(payload, self._reference_id)
        logger.debug(
            "Spot rates %s=%s %s=%s (%s)",
            self._native_id,
            native_price,
            self._reference_id,
            reference_price,
            self._vs_currency,
        )

        mana = Decimal(str(eth_amount)) * native_price / reference_price
        return int(mana * ONE_ETH_IN_WEI)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RatesClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


__all__ = ["RatesClient", "TokenConverter"]
