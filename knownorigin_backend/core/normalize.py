from __future__ import annotations

from .errors import UnrecognizedShapeError
from .models import (
    NFT,
    EditionFragment,
    Fragment,
    Network,
    NFTData,
    TokenFragment,
    VendorName,
)

CATEGORY = "art"


def get_nft_id(contract_address: str, token_id: str) -> str:
    return f"{contract_address}-{token_id}"


def get_owner(fragment: Fragment) -> str:
    if isinstance(fragment, TokenFragment):
        return fragment.current_owner.id
    if isinstance(fragment, EditionFragment):
        return fragment.artist_account
    raise UnrecognizedShapeError(fragment)


def get_default_url(fragment: Fragment, origin: str) -> str:
    if not isinstance(fragment, (TokenFragment, EditionFragment)):
        raise UnrecognizedShapeError(fragment)
    return f"{origin}/{fragment.type.lower()}/{fragment.id}"


def to_nft(
    fragment: Fragment,
    *,
    contract_address: str,
    origin: str,
    chain_id: int,
) -> NFT:
    """Convert a token or edition fragment into the canonical NFT model.

    ``contract_address`` and ``origin`` are resolved once by the caller for
    the whole batch.
    """

    owner = get_owner(fragment)
    token_id = fragment.id
    metadata = fragment.metadata

    return NFT(
        id=get_nft_id(contract_address, token_id),
        token_id=token_id,
        contract_address=contract_address,
        active_order_id="",
        owner=owner,
        name=metadata.name,
        image=metadata.image,
        url=get_default_url(fragment, origin),
        # Both shapes are listed with edition-style metadata.
        data=NFTData(description=metadata.description, is_edition=True),
        category=CATEGORY,
        vendor=VendorName.KNOWN_ORIGIN,
        chain_id=chain_id,
        network=Network.ETHEREUM,
    )


__all__ = ["CATEGORY", "get_default_url", "get_nft_id", "get_owner", "to_nft"]
