from __future__ import annotations

from typing import Mapping, Protocol

from ..config import Settings
from .errors import ContractNotFoundError
from .models import ContractName, VendorName


class ContractRegistry(Protocol):
    def resolve_address(self, name: ContractName) -> str: ...


class OriginResolver(Protocol):
    def resolve_origin(self, vendor: VendorName) -> str: ...


class StaticContractRegistry:
    """Contract addresses for a single chain, keyed by role."""

    def __init__(self, addresses: Mapping[ContractName, str | None]) -> None:
        self._addresses = {name: address for name, address in addresses.items() if address}

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticContractRegistry":
        return cls(
            {
                ContractName.DIGITAL_ASSET: settings.digital_asset_address,
                ContractName.MARKETPLACE_ADAPTER: settings.marketplace_adapter_address,
            }
        )

    def resolve_address(self, name: ContractName) -> str:
        try:
            return self._addresses[name]
        except KeyError:
            raise ContractNotFoundError(str(name)) from None


class StaticOriginResolver:
    def __init__(self, origins: Mapping[VendorName, str]) -> None:
        self._origins = {vendor: origin.rstrip("/") for vendor, origin in origins.items()}

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticOriginResolver":
        return cls({VendorName.KNOWN_ORIGIN: settings.known_origin_origin})

    def resolve_origin(self, vendor: VendorName) -> str:
        try:
            return self._origins[vendor]
        except KeyError:
            raise ValueError(f"No origin configured for vendor {vendor}") from None


__all__ = [
    "ContractRegistry",
    "OriginResolver",
    "StaticContractRegistry",
    "StaticOriginResolver",
]
