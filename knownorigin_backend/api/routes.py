from __future__ import annotations

import logging
from typing import Any

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from ..core.errors import CollaboratorFailure, FragmentNotFoundError
from ..core.models import NFTsCountParams, NFTsFetchFilters, NFTsFetchParams, SortBy, SortDirection
from ..service import NFTService

logger = logging.getLogger(__name__)

router = APIRouter()

# Failures reported by the subgraph or the rates API, including transport errors.
UPSTREAM_ERRORS = (CollaboratorFailure, httpx.HTTPError)


def get_service(request: Request) -> NFTService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=500, detail="NFT service is not available")
    return service


def _filters(is_token: bool | None) -> NFTsFetchFilters | None:
    return NFTsFetchFilters(is_token=is_token) if is_token is not None else None


@router.get("/healthz")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/v1/nfts")
async def list_nfts(
    first: int = Query(default=24, ge=1, le=1000),
    skip: int = Query(default=0, ge=0),
    order_by: SortBy | None = None,
    order_direction: SortDirection = SortDirection.DESC,
    address: str | None = None,
    search: str | None = None,
    is_token: bool | None = None,
    service: NFTService = Depends(get_service),
) -> dict[str, Any]:
    params = NFTsFetchParams(
        first=first,
        skip=skip,
        order_by=order_by,
        order_direction=order_direction,
        address=address,
        search=search,
    )
    try:
        result = await service.fetch(params, _filters(is_token))
    except UPSTREAM_ERRORS as exc:
        logger.warning("NFT fetch failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return result.serialize()


@router.get("/v1/nfts/count")
async def count_nfts(
    order_by: SortBy | None = None,
    order_direction: SortDirection = SortDirection.DESC,
    address: str | None = None,
    search: str | None = None,
    is_token: bool | None = None,
    service: NFTService = Depends(get_service),
) -> dict[str, int]:
    params = NFTsCountParams(
        order_by=order_by,
        order_direction=order_direction,
        address=address,
        search=search,
    )
    try:
        total = await service.count(params, _filters(is_token))
    except UPSTREAM_ERRORS as exc:
        logger.warning("NFT count failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {"count": total}


@router.get("/v1/nfts/{contract_address}/{token_id}")
async def get_nft(
    contract_address: str,
    token_id: str,
    service: NFTService = Depends(get_service),
) -> dict[str, Any]:
    try:
        nft, order = await service.fetch_one(contract_address, token_id)
    except FragmentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except UPSTREAM_ERRORS as exc:
        logger.warning("NFT lookup failed for %s: %s", token_id, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return {
        "nft": nft.model_dump(mode="json", by_alias=True),
        "order": order.model_dump(mode="json", by_alias=True) if order else None,
    }
