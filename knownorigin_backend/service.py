from __future__ import annotations

import asyncio
import logging
from functools import cached_property

from .core.contracts import ContractRegistry, OriginResolver
from .core.errors import PreconditionError
from .core.models import (
    NFT,
    ContractName,
    EditionFragment,
    Fragment,
    NFTsCountParams,
    NFTsFetchFilters,
    NFTsFetchParams,
    NFTsResult,
    Order,
    VendorName,
)
from .core.normalize import to_nft
from .core.orders import to_account, to_order
from .core.pricing import FeePolicy, format_ether
from .ingress.graph import MAX_QUERY_SIZE, FragmentSource
from .ingress.rates import TokenConverter
from .integrations.wallet import ERC721Factory, SignerProvider, Wallet

logger = logging.getLogger(__name__)


class CallContext:
    """Registry and origin lookups, resolved at most once per service call."""

    def __init__(self, registry: ContractRegistry, origins: OriginResolver) -> None:
        self._registry = registry
        self._origins = origins

    @cached_property
    def contract_address(self) -> str:
        return self._registry.resolve_address(ContractName.DIGITAL_ASSET)

    @cached_property
    def marketplace_address(self) -> str:
        return self._registry.resolve_address(ContractName.MARKETPLACE_ADAPTER)

    @cached_property
    def origin(self) -> str:
        return self._origins.resolve_origin(VendorName.KNOWN_ORIGIN)


class NFTService:
    """KnownOrigin NFTs, accounts and orders assembled from the subgraph."""

    def __init__(
        self,
        *,
        token_api: FragmentSource,
        edition_api: FragmentSource,
        token_converter: TokenConverter,
        marketplace_price: FeePolicy,
        registry: ContractRegistry,
        origins: OriginResolver,
        chain_id: int,
        signer_provider: SignerProvider | None = None,
        erc721: ERC721Factory | None = None,
    ) -> None:
        self._token_api = token_api
        self._edition_api = edition_api
        self._token_converter = token_converter
        self._marketplace_price = marketplace_price
        self._registry = registry
        self._origins = origins
        self._chain_id = chain_id
        self._signer_provider = signer_provider
        self._erc721 = erc721

    async def fetch(
        self,
        params: NFTsFetchParams,
        filters: NFTsFetchFilters | None = None,
    ) -> NFTsResult:
        fragments = await self._get_api(filters).fetch(params)
        total, one_eth_in_mana = await asyncio.gather(
            self.count(params, filters),
            self.get_one_eth_in_mana(),
        )

        context = self._new_context()
        nfts: list[NFT] = []
        orders: list[Order] = []
        owned: dict[str, list[str]] = {}

        for fragment in fragments:
            nft, order = self._to_nft_and_order(fragment, one_eth_in_mana, context)
            if order is not None:
                orders.append(order)

            owned.setdefault(nft.owner, []).append(nft.id)
            nfts.append(nft)

        accounts = [to_account(address, nft_ids) for address, nft_ids in owned.items()]

        logger.info(
            "Fetched %s NFTs (%s orders, %s accounts, total=%s, is_token=%s)",
            len(nfts),
            len(orders),
            len(accounts),
            total,
            bool(filters and filters.is_token),
        )

        return NFTsResult(nfts=nfts, accounts=accounts, orders=orders, total=total)

    async def count(
        self,
        count_params: NFTsCountParams,
        filters: NFTsFetchFilters | None = None,
    ) -> int:
        params = NFTsFetchParams(
            **count_params.model_dump(include=set(NFTsCountParams.model_fields)),
            first=MAX_QUERY_SIZE,
            skip=0,
        )
        if filters is None:
            token_count, edition_count = await asyncio.gather(
                self._token_api.count(params),
                self._edition_api.count(params),
            )
            return token_count + edition_count

        return await self._get_api(filters).count(params)

    async def fetch_one(self, contract_address: str, token_id: str) -> tuple[NFT, Order | None]:
        # contract_address is part of the vendor-agnostic signature; the
        # KnownOrigin contract always comes from the registry.
        fragment = await self._get_api().fetch_one(token_id)
        one_eth_in_mana = await self.get_one_eth_in_mana()

        return self._to_nft_and_order(fragment, one_eth_in_mana, self._new_context())

    async def transfer(self, wallet: Wallet | None, to_address: str, nft: NFT) -> str:
        """Submit an ERC-721 ``transferFrom`` and return the transaction hash.

        Returns as soon as the transaction is sent; confirmation is left to
        the caller.
        """

        if not wallet:
            raise PreconditionError("Invalid address. Wallet must be connected.")
        if self._signer_provider is None or self._erc721 is None:
            raise RuntimeError("Transfers need a signer provider and an ERC-721 factory")

        signer = await self._signer_provider.current_signer()
        erc721 = self._erc721.connect(nft.contract_address, signer)
        transaction = await erc721.transfer_from(wallet.address, to_address, nft.token_id)

        logger.info("Submitted transfer of %s from %s to %s (tx=%s)", nft.id, wallet.address, to_address, transaction.hash)
        return transaction.hash

    async def get_one_eth_in_mana(self) -> str:
        mana = await self._token_converter.market_eth_to_mana(1)
        return format_ether(mana)

    def _new_context(self) -> CallContext:
        return CallContext(self._registry, self._origins)

    def _get_api(self, filters: NFTsFetchFilters | None = None) -> FragmentSource:
        return self._token_api if filters and filters.is_token else self._edition_api

    def _to_nft_and_order(
        self,
        fragment: Fragment,
        one_eth_in_mana: str,
        context: CallContext,
    ) -> tuple[NFT, Order | None]:
        nft = to_nft(
            fragment,
            contract_address=context.contract_address,
            origin=context.origin,
            chain_id=self._chain_id,
        )
        if not isinstance(fragment, EditionFragment):
            return nft, None

        order = to_order(
            fragment,
            one_eth_in_mana,
            fee_policy=self._marketplace_price,
            contract_address=context.contract_address,
            marketplace_address=context.marketplace_address,
            chain_id=self._chain_id,
        )
        return nft.model_copy(update={"active_order_id": order.id}), order


__all__ = ["CallContext", "NFTService"]
