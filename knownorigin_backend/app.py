from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router
from .config import settings
from .core.contracts import StaticContractRegistry, StaticOriginResolver
from .core.errors import ContractNotFoundError
from .core.models import ContractName
from .core.pricing import MarketplacePrice
from .ingress.edition import EditionAPI
from .ingress.graph import GraphClient
from .ingress.rates import RatesClient
from .ingress.token import TokenAPI
from .service import NFTService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry = StaticContractRegistry.from_settings(settings)
    try:
        for name in ContractName:
            registry.resolve_address(name)
    except ContractNotFoundError:
        logger.exception("Contract registry is incomplete; set KO_DIGITAL_ASSET_ADDRESS and KO_MARKETPLACE_ADAPTER_ADDRESS")
        raise

    graph_client = GraphClient(settings.graph_url, timeout=settings.request_timeout)
    rates_client = RatesClient(
        settings.rates_url,
        native_id=settings.native_rate_id,
        reference_id=settings.reference_rate_id,
        vs_currency=settings.rates_vs_currency,
        timeout=settings.request_timeout,
    )
    service = NFTService(
        token_api=TokenAPI(graph_client),
        edition_api=EditionAPI(graph_client),
        token_converter=rates_client,
        marketplace_price=MarketplacePrice(settings.marketplace_fee_per_million),
        registry=registry,
        origins=StaticOriginResolver.from_settings(settings),
        chain_id=settings.chain_id,
    )

    app.state.settings = settings
    app.state.service = service

    logger.info(
        "Backend configuration loaded (graph_url=%s, rates_url=%s, chain_id=%s, fee_per_million=%s)",
        settings.graph_url,
        settings.rates_url,
        settings.chain_id,
        settings.marketplace_fee_per_million,
    )

    try:
        yield
    finally:
        await graph_client.close()
        await rates_client.close()


def create_app() -> FastAPI:
    app = FastAPI(title="KnownOrigin Vendor Backend", lifespan=lifespan)
    origins = [origin.strip() for origin in settings.cors_allow_origins.split(",") if origin.strip()]
    if not origins:
        origins = ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()
