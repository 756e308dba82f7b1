from __future__ import annotations

import json
import logging
from typing import Any, ClassVar, Dict, List, Mapping, Protocol

import httpx

from ..core.errors import FragmentNotFoundError, SourceQueryError
from ..core.models import AssetType, Fragment, NFTsFetchParams, SortBy, parse_fragment

logger = logging.getLogger(__name__)

MAX_QUERY_SIZE = 1000

METADATA_FIELDS = "metadata { name description image }"


class FragmentSource(Protocol):
    async def fetch(self, params: NFTsFetchParams) -> list[Fragment]: ...

    async def count(self, params: NFTsFetchParams) -> int: ...

    async def fetch_one(self, token_id: str) -> Fragment: ...


def gql_literal(value: Any) -> str:
    """Render a Python value as an inline GraphQL literal."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Mapping):
        rendered = ", ".join(f"{key}: {gql_literal(item)}" for key, item in value.items())
        return f"{{ {rendered} }}"
    return json.dumps(str(value))


class GraphClient:
    """Async HTTP client for the KnownOrigin subgraph."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def query(self, query: str, variables: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """Run a GraphQL query and return its ``data`` payload."""

        response = await self._client.post(
            self._url,
            json={"query": query, "variables": variables or {}},
        )
        response.raise_for_status()
        payload = response.json()

        errors = payload.get("errors")
        if errors:
            raise SourceQueryError(errors)

        return payload.get("data") or {}

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GraphClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class FragmentAPI:
    """Paginated queries over one subgraph entity.

    Subclasses declare the entity names, the selected fields and how the
    generic fetch params map onto the entity's filters.
    """

    asset_type: ClassVar[AssetType]
    list_entity: ClassVar[str]
    one_entity: ClassVar[str]
    fields: ClassVar[str]
    owner_field: ClassVar[str]
    order_fields: ClassVar[Mapping[SortBy, str]] = {}
    static_filters: ClassVar[Mapping[str, Any]] = {}

    def __init__(self, client: GraphClient) -> None:
        self._client = client

    def _where(self, params: NFTsFetchParams) -> Dict[str, Any]:
        where: Dict[str, Any] = dict(self.static_filters)
        if params.address:
            where[self.owner_field] = params.address.lower()
        if params.search:
            where["metadata_"] = {"name_contains_nocase": params.search}
        return where

    def build_list_query(self, params: NFTsFetchParams, fields: str) -> str:
        arguments = [f"first: {int(params.first)}", f"skip: {int(params.skip)}"]

        order_field = self.order_fields.get(params.order_by) if params.order_by else None
        if order_field:
            arguments.append(f"orderBy: {order_field}")
            arguments.append(f"orderDirection: {params.order_direction.value}")

        where = self._where(params)
        if where:
            arguments.append(f"where: {gql_literal(where)}")

        return f"query {{ {self.list_entity}({', '.join(arguments)}) {{ {fields} }} }}"

    def _parse(self, rows: List[Dict[str, Any]]) -> list[Fragment]:
        return [parse_fragment(row, self.asset_type) for row in rows]

    async def fetch(self, params: NFTsFetchParams) -> list[Fragment]:
        data = await self._client.query(self.build_list_query(params, self.fields))
        rows = data.get(self.list_entity) or []
        logger.debug("Fetched %s %s fragments (first=%s, skip=%s)", len(rows), self.asset_type, params.first, params.skip)
        return self._parse(rows)

    async def count(self, params: NFTsFetchParams) -> int:
        data = await self._client.query(self.build_list_query(params, "id"))
        return len(data.get(self.list_entity) or [])

    async def fetch_one(self, token_id: str) -> Fragment:
        query = f"query One($id: ID!) {{ {self.one_entity}(id: $id) {{ {self.fields} }} }}"
        data = await self._client.query(query, {"id": token_id})
        row = data.get(self.one_entity)
        if not row:
            raise FragmentNotFoundError(str(self.asset_type), token_id)
        return parse_fragment(row, self.asset_type)


__all__ = ["FragmentAPI", "FragmentSource", "GraphClient", "MAX_QUERY_SIZE", "gql_literal"]
