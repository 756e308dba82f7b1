from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(".env.local", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    graph_url: str = Field(
        default="https://api.thegraph.com/subgraphs/name/knownorigin/known-origin",
        alias="KO_GRAPH_URL",
        description="GraphQL endpoint of the KnownOrigin subgraph.",
    )
    rates_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        alias="RATES_API_URL",
        description="Base URL for the spot-price API used to convert ETH into MANA.",
    )
    native_rate_id: str = Field(
        default="ethereum",
        alias="RATES_NATIVE_ID",
        description="Rates API identifier of the chain's native currency.",
    )
    reference_rate_id: str = Field(
        default="decentraland",
        alias="RATES_REFERENCE_ID",
        description="Rates API identifier of the reference currency prices are quoted in.",
    )
    rates_vs_currency: str = Field(
        default="usd",
        alias="RATES_VS_CURRENCY",
        description="Quote currency used to cross both rates.",
    )
    chain_id: int = Field(
        default=1,
        alias="CHAIN_ID",
        description="Chain id stamped on every NFT and order.",
    )
    marketplace_fee_per_million: int = Field(
        default=25_000,
        alias="MARKETPLACE_FEE_PER_MILLION",
        description="Marketplace fee added on top of edition prices, in parts per million.",
    )
    digital_asset_address: Optional[str] = Field(
        default="0xFBeef911Dc5821886e1dda71586d90eD28174B7d",
        alias="KO_DIGITAL_ASSET_ADDRESS",
        description="Address of the KnownOrigin ERC-721 contract.",
    )
    marketplace_adapter_address: Optional[str] = Field(
        default=None,
        alias="KO_MARKETPLACE_ADAPTER_ADDRESS",
        description="Address of the marketplace adapter that buys editions on behalf of users.",
    )
    known_origin_origin: str = Field(
        default="https://knownorigin.io",
        alias="KO_ORIGIN_URL",
        description="Public site used to build NFT links.",
    )
    request_timeout: float = Field(
        default=10.0,
        alias="REST_TIMEOUT_SEC",
        description="Timeout in seconds for subgraph and rates requests.",
    )
    cors_allow_origins: str = Field(
        default="*",
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of origins allowed for CORS (use '*' for all).",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


settings = get_settings()
