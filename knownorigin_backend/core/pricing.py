from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal, localcontext
from typing import Protocol

ETHER_DECIMALS = 18
ONE_ETH_IN_WEI = 10**ETHER_DECIMALS  # 10 ** 18
FEE_DENOMINATOR = 1_000_000

_SMALLEST_UNIT = Decimal(1).scaleb(-ETHER_DECIMALS)
# Wide enough for any uint256 amount multiplied by a decimal rate.
_PRECISION = 160


class FeePolicy(Protocol):
    def add_fee(self, wei: int) -> int: ...


class MarketplacePrice:
    """Adds the marketplace fee to a native-currency amount."""

    def __init__(self, fee_per_million: int) -> None:
        if not 0 <= fee_per_million <= FEE_DENOMINATOR:
            raise ValueError("fee_per_million must be between 0 and 1_000_000")
        self._fee_per_million = fee_per_million

    @property
    def fee_per_million(self) -> int:
        return self._fee_per_million

    def add_fee(self, wei: int) -> int:
        wei = int(wei)
        return wei + wei * self._fee_per_million // FEE_DENOMINATOR


def format_ether(wei: int) -> str:
    """Render a wei amount as a decimal ether string, e.g. ``2.0`` or ``1.025``."""

    value = int(wei)
    sign = "-" if value < 0 else ""
    whole, fraction = divmod(abs(value), ONE_ETH_IN_WEI)
    fraction_str = f"{fraction:0{ETHER_DECIMALS}d}".rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def _plain(value: Decimal) -> str:
    return format(value.normalize(), "f")


def convert_wei(total_wei: int, one_eth_in_reference: str) -> str:
    """Convert a wei amount into the reference currency.

    The result is floored to the reference currency's smallest unit and
    rendered as a plain decimal string.
    """

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        amount = Decimal(int(total_wei)) * Decimal(one_eth_in_reference) / ONE_ETH_IN_WEI
        amount = amount.quantize(_SMALLEST_UNIT, rounding=ROUND_FLOOR)
        return _plain(amount)


__all__ = [
    "ETHER_DECIMALS",
    "FeePolicy",
    "MarketplacePrice",
    "ONE_ETH_IN_WEI",
    "convert_wei",
    "format_ether",
]
