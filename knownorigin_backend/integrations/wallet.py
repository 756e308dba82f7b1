from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from ..core.models import Network


class Wallet(BaseModel):
    """A connected wallet session."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str
    chain_id: int = Field(default=1, alias="chainId")
    network: Network = Network.ETHEREUM


class Transaction(Protocol):
    hash: str


class ERC721Contract(Protocol):
    async def transfer_from(self, from_address: str, to_address: str, token_id: str) -> Transaction: ...


class ERC721Factory(Protocol):
    def connect(self, address: str, signer: Any) -> ERC721Contract: ...


class SignerProvider(Protocol):
    async def current_signer(self) -> Any:
        """Return the signer of the active wallet session."""
        ...


__all__ = ["ERC721Contract", "ERC721Factory", "SignerProvider", "Transaction", "Wallet"]
