from __future__ import annotations

from ..core.models import AssetType, SortBy
from .graph import METADATA_FIELDS, FragmentAPI


class TokenAPI(FragmentAPI):
    """Minted tokens, owned by whoever holds them now."""

    asset_type = AssetType.TOKEN
    list_entity = "tokens"
    one_entity = "token"
    fields = f"id {METADATA_FIELDS} currentOwner {{ id }}"
    owner_field = "currentOwner"
    order_fields = {SortBy.NEWEST: "birthTimestamp"}


__all__ = ["TokenAPI"]
