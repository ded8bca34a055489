"""Runtime configuration for the token issuer."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Tuple

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .networks import Network

DEFAULT_DEVNET_ENDPOINTS = [
    "https://api.devnet.solana.com",
    "https://devnet.genesysgo.net/",
]
DEFAULT_MAINNET_ENDPOINTS = [
    "https://api.mainnet-beta.solana.com",
    "https://solana-mainnet.g.alchemy.com/v2/demo",
]


class Settings(BaseSettings):
    """Environment-driven settings, prefixed with ``TOKEN_ISSUER_``."""

    model_config = SettingsConfigDict(
        env_prefix="TOKEN_ISSUER_",
        env_file=".env",
        extra="ignore",
    )

    devnet_endpoints: List[str] = Field(default_factory=lambda: list(DEFAULT_DEVNET_ENDPOINTS))
    mainnet_endpoints: List[str] = Field(default_factory=lambda: list(DEFAULT_MAINNET_ENDPOINTS))
    rpc_timeout_seconds: float = 10.0
    fee_per_transaction_lamports: int = 50_000
    funding_buffer_lamports: int = 10_000
    metadata_upload_url: Optional[str] = None
    metadata_upload_timeout_seconds: float = 30.0
    payer_key: Optional[SecretStr] = None
    log_level: str = "INFO"

    @field_validator("fee_per_transaction_lamports", "funding_buffer_lamports")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Lamport amounts must be non-negative.")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()

    def endpoints_for(self, network: Network) -> Tuple[str, ...]:
        if network == Network.DEVNET:
            return tuple(self.devnet_endpoints)
        return tuple(self.mainnet_endpoints)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
