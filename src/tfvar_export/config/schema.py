"""Configuration models."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from tfvar_export.core.provider import DEFAULT_BASE_URL
from tfvar_export.engine.ratelimit import DEFAULT_PER, DEFAULT_RATE


class ProviderSettings(BaseSettings):
    """Terraform API connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``TFVE_`` prefix.  Constructor kwargs take precedence.

    ``token`` is typically provided via the ``TFVE_TOKEN`` environment
    variable rather than YAML to avoid committing secrets to version control.
    """

    model_config = SettingsConfigDict(env_prefix="TFVE_", extra="forbid")

    base_url: str = DEFAULT_BASE_URL
    organization_name: str | None = None
    token: SecretStr | None = None
    verify_ssl: bool = True
    timeout: float = Field(default=30.0, gt=0)
    page_size: int = Field(default=100, gt=0, le=100)
    # Published API limit: 20 requests per second per token.
    rate_limit: int = Field(default=DEFAULT_RATE, gt=0)
    rate_window: float = Field(default=DEFAULT_PER, gt=0)


def _split_names(v: Any) -> Any:
    if v is None:
        return []
    if isinstance(v, str):
        return [n.strip() for n in v.split(",") if n.strip()]
    return v


class SyncOptions(BaseModel):
    workspaces: Annotated[list[str], BeforeValidator(_split_names)] = []
    allow_update: bool = False
    continue_on_error: bool = False


class Config(BaseModel):
    """Full configuration: provider connection plus sync options."""

    provider: ProviderSettings
    sync: SyncOptions = SyncOptions()
    config_dir: Path = Path()
