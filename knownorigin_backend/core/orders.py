from __future__ import annotations

from typing import Iterable

from .models import Account, EditionFragment, ListingStatus, Network, Order, VendorName
from .pricing import FeePolicy, convert_wei


def get_order_id(edition_id: str) -> str:
    return f"{VendorName.KNOWN_ORIGIN}-order-{edition_id}"


def to_order(
    edition: EditionFragment,
    one_eth_in_mana: str,
    *,
    fee_policy: FeePolicy,
    contract_address: str,
    marketplace_address: str,
    chain_id: int,
) -> Order:
    """Derive the open sale order of an edition.

    The marketplace fee is added in wei before the amount is converted into
    MANA at ``one_eth_in_mana``.
    """

    total_wei = fee_policy.add_fee(edition.price_in_wei)
    price = convert_wei(total_wei, one_eth_in_mana)

    return Order(
        id=get_order_id(edition.id),
        token_id=edition.id,
        contract_address=contract_address,
        marketplace_address=marketplace_address,
        owner=edition.artist_account,
        buyer=None,
        price=price,
        eth_price=str(edition.price_in_wei),
        status=ListingStatus.OPEN,
        created_at=edition.created_timestamp,
        updated_at=edition.created_timestamp,
        network=Network.ETHEREUM,
        chain_id=chain_id,
    )


def to_account(address: str, nft_ids: Iterable[str] = ()) -> Account:
    return Account(id=address, address=address, nft_ids=tuple(nft_ids))


__all__ = ["get_order_id", "to_account", "to_order"]
