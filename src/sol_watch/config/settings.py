"""sol-watch settings.

Sources, strongest first:
1. Environment variables (prefix: ``SOLWATCH_``, nested via ``__``)
2. YAML config file (``SOLWATCH_CONFIG_PATH`` env var or :meth:`AppConfig.from_yaml`)
3. Defaults defined here
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sol_watch.tenants.plans import DEFAULT_PLAN, PlanTier

# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


class Commitment(enum.StrEnum):
    """Solana RPC commitment level."""

    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"


# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """Bind address of the API server."""

    model_config = SettingsConfigDict(
        env_prefix="SOLWATCH_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3004


class RPCConfig(BaseSettings):
    """Solana JSON-RPC endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLWATCH_RPC__",
        case_sensitive=False,
    )

    url: str = "https://api.mainnet-beta.solana.com"
    commitment: Commitment = Commitment.CONFIRMED
    timeout: float = 30.0


class WatcherConfig(BaseSettings):
    """Watch cycle timing and window settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLWATCH_WATCHER__",
        case_sensitive=False,
    )

    enabled: bool = True
    interval: float = Field(default=30.0, gt=0, description="Seconds between two watch cycles")
    signature_limit: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Signatures fetched per address; older unseen activity is dropped",
    )
    send_delay: float = Field(default=0.5, ge=0, description="Pause after each notification")
    rate_limit_pause: float = Field(default=5.0, ge=0, description="Pause after an RPC 429")


class NotifierConfig(BaseSettings):
    """Outbound notification settings."""

    model_config = SettingsConfigDict(
        env_prefix="SOLWATCH_NOTIFIER__",
        case_sensitive=False,
    )

    explorer_url: str = "https://solscan.io/tx"
    branding: str = "Powered by Solana Wallet Bot"
    timeout: float = 10.0


class MetricsConfig(BaseSettings):
    """Whether the ``/metrics`` registry is populated."""

    model_config = SettingsConfigDict(
        env_prefix="SOLWATCH_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


class TenantConfig(BaseModel):
    """A tenant seeded into the in-memory directory at startup."""

    id: str
    plan: PlanTier = DEFAULT_PLAN
    destination: str | None = None
    addresses: list[str] = Field(default_factory=list)

    @field_validator("addresses")
    @classmethod
    def _strip_addresses(cls, value: list[str]) -> list[str]:
        return [a.strip() for a in value if a.strip()]


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Read *path* as a YAML mapping. Anything else, a missing file included, yields ``{}``."""
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Root settings object handed to the engine and the API.

    Nested sections can be set with ``SOLWATCH_<SECTION>__<FIELD>``, e.g.
    ``SOLWATCH_WATCHER__INTERVAL=15``. Tenants are usually listed in YAML.
    """

    model_config = SettingsConfigDict(
        env_prefix="SOLWATCH_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: str = "INFO"
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    rpc: RPCConfig = Field(default_factory=RPCConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    tenants: list[TenantConfig] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fill in values from ``config_path`` that the environment did not set."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Load settings from the YAML file at *path*; environment variables win."""
        return cls(config_path=str(path))
