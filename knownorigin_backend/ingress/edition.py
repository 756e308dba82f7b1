from __future__ import annotations

from ..core.models import AssetType, SortBy
from .graph import METADATA_FIELDS, FragmentAPI


class EditionAPI(FragmentAPI):
    """Editions still on primary sale from the artist account."""

    asset_type = AssetType.EDITION
    list_entity = "editions"
    one_entity = "edition"
    fields = f"id {METADATA_FIELDS} artistAccount priceInWei createdTimestamp"
    owner_field = "artistAccount"
    order_fields = {SortBy.NEWEST: "createdTimestamp"}
    static_filters = {"active": True}


__all__ = ["EditionAPI"]
