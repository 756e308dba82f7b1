from __future__ import annotations

import math
from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_serializer


class VendorName(StrEnum):
    KNOWN_ORIGIN = "KNOWN_ORIGIN"


class AssetType(StrEnum):
    """Discriminant shared by every subgraph fragment."""

    TOKEN = "token"
    EDITION = "edition"


class Network(StrEnum):
    ETHEREUM = "ETHEREUM"


class ListingStatus(StrEnum):
    OPEN = "open"
    SOLD = "sold"
    CANCELLED = "cancelled"


class ContractName(StrEnum):
    DIGITAL_ASSET = "DIGITAL_ASSET"
    MARKETPLACE_ADAPTER = "MARKETPLACE_ADAPTER"


class SortBy(StrEnum):
    NEWEST = "newest"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class FragmentMetadata(BaseModel):
    name: str = ""
    description: str = ""
    image: str = ""


class OwnerRef(BaseModel):
    id: str


class TokenFragment(BaseModel):
    """A single minted token with an explicit current owner."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["token"] = "token"
    id: str
    metadata: FragmentMetadata
    current_owner: OwnerRef = Field(alias="currentOwner")


class EditionFragment(BaseModel):
    """A limited edition sold directly from the artist account."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["edition"] = "edition"
    id: str
    metadata: FragmentMetadata
    artist_account: str = Field(alias="artistAccount")
    price_in_wei: int = Field(alias="priceInWei", ge=0)
    created_timestamp: int = Field(alias="createdTimestamp")


Fragment = Annotated[Union[TokenFragment, EditionFragment], Field(discriminator="type")]

_fragment_adapter: TypeAdapter[Fragment] = TypeAdapter(Fragment)


def parse_fragment(payload: dict[str, Any], asset_type: AssetType | str) -> Fragment:
    """Validate a raw subgraph row, tagging it with the source it came from."""

    return _fragment_adapter.validate_python({**payload, "type": str(asset_type)})


class NFTData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: str
    is_edition: bool = Field(alias="isEdition")


class NFT(BaseModel):
    """Canonical NFT produced from either fragment shape."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    token_id: str = Field(alias="tokenId")
    contract_address: str = Field(alias="contractAddress")
    active_order_id: str = Field(default="", alias="activeOrderId")
    owner: str
    name: str
    image: str
    url: str
    data: NFTData
    category: str
    vendor: VendorName
    chain_id: int = Field(alias="chainId")
    network: Network
    issued_id: str | None = Field(default=None, alias="issuedId")
    item_id: str | None = Field(default=None, alias="itemId")
    created_at: int = Field(default=0, alias="createdAt")
    updated_at: int = Field(default=0, alias="updatedAt")
    sold_at: int = Field(default=0, alias="soldAt")


class Account(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    address: str
    nft_ids: tuple[str, ...] = Field(default=(), alias="nftIds")


class Order(BaseModel):
    """Sale order derived from an edition; never persisted."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    token_id: str = Field(alias="tokenId")
    contract_address: str = Field(alias="contractAddress")
    marketplace_address: str = Field(alias="marketplaceAddress")
    owner: str
    buyer: str | None = None
    price: str
    eth_price: str = Field(alias="ethPrice")
    status: ListingStatus
    created_at: int = Field(alias="createdAt")
    updated_at: int = Field(alias="updatedAt")
    expires_at: float = Field(default=math.inf, alias="expiresAt")
    network: Network
    chain_id: int = Field(alias="chainId")

    @field_serializer("expires_at", when_used="json")
    def _serialize_expires_at(self, value: float) -> float | None:
        # JSON has no infinity; an open-ended order expires at null.
        return None if math.isinf(value) else value


class NFTsCountParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    order_by: SortBy | None = Field(default=None, alias="orderBy")
    order_direction: SortDirection = Field(default=SortDirection.DESC, alias="orderDirection")
    address: str | None = None
    search: str | None = None


class NFTsFetchParams(NFTsCountParams):
    first: int = Field(default=24, ge=0)
    skip: int = Field(default=0, ge=0)


class NFTsFetchFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_token: bool = Field(default=False, alias="isToken")


class NFTsResult(BaseModel):
    """Output of one aggregation call."""

    model_config = ConfigDict(frozen=True)

    nfts: list[NFT]
    accounts: list[Account]
    orders: list[Order]
    total: int

    def serialize(self) -> dict[str, Any]:
        """Return a JSON-safe dict with API-friendly field names."""

        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "Account",
    "AssetType",
    "ContractName",
    "EditionFragment",
    "Fragment",
    "FragmentMetadata",
    "ListingStatus",
    "NFT",
    "NFTData",
    "NFTsCountParams",
    "NFTsFetchFilters",
    "NFTsFetchParams",
    "NFTsResult",
    "Network",
    "Order",
    "OwnerRef",
    "SortBy",
    "SortDirection",
    "TokenFragment",
    "VendorName",
    "parse_fragment",
]
