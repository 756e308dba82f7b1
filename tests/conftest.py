from __future__ import annotations

import asyncio
from collections import Counter
from dataclasses import dataclass, field

import pytest

from knownorigin_backend.core.contracts import StaticContractRegistry, StaticOriginResolver
from knownorigin_backend.core.errors import FragmentNotFoundError
from knownorigin_backend.core.models import (
    ContractName,
    EditionFragment,
    Fragment,
    NFTsFetchParams,
    TokenFragment,
    VendorName,
)
from knownorigin_backend.core.pricing import ONE_ETH_IN_WEI, MarketplacePrice
from knownorigin_backend.service import NFTService

DIGITAL_ASSET = "0xfbeef911dc5821886e1dda71586d90ed28174b7d"
MARKETPLACE_ADAPTER = "0x00000000000000000000000000000000000adapt"
ORIGIN = "https://knownorigin.io"


def make_token(token_id: str, owner: str, name: str = "Token") -> TokenFragment:
    return TokenFragment.model_validate(
        {
            "id": token_id,
            "metadata": {"name": name, "description": f"{name} description", "image": f"ipfs://{token_id}"},
            "currentOwner": {"id": owner},
        }
    )


def make_edition(
    edition_id: str,
    artist: str,
    price_in_wei: int | str = ONE_ETH_IN_WEI,
    created: int | str = 1_600_000_000,
    name: str = "Edition",
) -> EditionFragment:
    return EditionFragment.model_validate(
        {
            "id": edition_id,
            "metadata": {"name": name, "description": f"{name} description", "image": f"ipfs://{edition_id}"},
            "artistAccount": artist,
            "priceInWei": str(price_in_wei),
            "createdTimestamp": str(created),
        }
    )


@dataclass
class FakeSource:
    fragments: list[Fragment] = field(default_factory=list)
    total: int = 0
    error: Exception | None = None
    fetch_calls: list[NFTsFetchParams] = field(default_factory=list)
    count_calls: list[NFTsFetchParams] = field(default_factory=list)
    fetch_one_calls: list[str] = field(default_factory=list)
    # Set when count starts; count then blocks on count_waits_for.
    count_started: asyncio.Event | None = None
    count_waits_for: asyncio.Event | None = None

    async def fetch(self, params: NFTsFetchParams) -> list[Fragment]:
        self.fetch_calls.append(params)
        if self.error:
            raise self.error
        return list(self.fragments)

    async def count(self, params: NFTsFetchParams) -> int:
        self.count_calls.append(params)
        if self.count_started:
            self.count_started.set()
        if self.count_waits_for:
            await self.count_waits_for.wait()
        if self.error:
            raise self.error
        return self.total

    async def fetch_one(self, token_id: str) -> Fragment:
        self.fetch_one_calls.append(token_id)
        if self.error:
            raise self.error
        for fragment in self.fragments:
            if fragment.id == token_id:
                return fragment
        raise FragmentNotFoundError("fake", token_id)


@dataclass
class FakeConverter:
    mana_wei: int = 2 * ONE_ETH_IN_WEI
    calls: int = 0
    error: Exception | None = None
    started: asyncio.Event | None = None
    waits_for: asyncio.Event | None = None

    async def market_eth_to_mana(self, eth_amount) -> int:
        self.calls += 1
        if self.started:
            self.started.set()
        if self.waits_for:
            await self.waits_for.wait()
        if self.error:
            raise self.error
        return int(eth_amount) * self.mana_wei


class CountingRegistry(StaticContractRegistry):
    def __init__(self, addresses) -> None:
        super().__init__(addresses)
        self.lookups: Counter[ContractName] = Counter()

    def resolve_address(self, name: ContractName) -> str:
        self.lookups[name] += 1
        return super().resolve_address(name)


@dataclass
class FakeTransaction:
    hash: str


@dataclass
class FakeERC721:
    transfers: list[tuple[str, str, str]] = field(default_factory=list)

    async def transfer_from(self, from_address: str, to_address: str, token_id: str) -> FakeTransaction:
        self.transfers.append((from_address, to_address, token_id))
        return FakeTransaction(hash="0xhash")


@dataclass
class FakeERC721Factory:
    contract: FakeERC721 = field(default_factory=FakeERC721)
    connections: list[tuple[str, object]] = field(default_factory=list)

    def connect(self, address: str, signer: object) -> FakeERC721:
        self.connections.append((address, signer))
        return self.contract


@dataclass
class FakeSignerProvider:
    signer: object = "signer"
    calls: int = 0

    async def current_signer(self) -> object:
        self.calls += 1
        return self.signer


@pytest.fixture
def token_api() -> FakeSource:
    return FakeSource()


@pytest.fixture
def edition_api() -> FakeSource:
    return FakeSource()


@pytest.fixture
def converter() -> FakeConverter:
    return FakeConverter()


@pytest.fixture
def registry() -> CountingRegistry:
    return CountingRegistry(
        {
            ContractName.DIGITAL_ASSET: DIGITAL_ASSET,
            ContractName.MARKETPLACE_ADAPTER: MARKETPLACE_ADAPTER,
        }
    )


@pytest.fixture
def signer_provider() -> FakeSignerProvider:
    return FakeSignerProvider()


@pytest.fixture
def erc721() -> FakeERC721Factory:
    return FakeERC721Factory()


@pytest.fixture
def service(token_api, edition_api, converter, registry, signer_provider, erc721) -> NFTService:
    return NFTService(
        token_api=token_api,
        edition_api=edition_api,
        token_converter=converter,
        marketplace_price=MarketplacePrice(25_000),
        registry=registry,
        origins=StaticOriginResolver({VendorName.KNOWN_ORIGIN: ORIGIN}),
        chain_id=1,
        signer_provider=signer_provider,
        erc721=erc721,
    )
