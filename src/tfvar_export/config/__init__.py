"""Configuration loading and convenience plan/sync API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tfvar_export.config.loader import ConfigError, load_config
from tfvar_export.config.schema import Config, ProviderSettings, SyncOptions
from tfvar_export.core.provider import TerraformProvider, TokenAuth
from tfvar_export.engine.engine import SyncEngine, check_unique_names
from tfvar_export.engine.ratelimit import RateLimiter

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from tfvar_export.core.workspaces import Workspace
    from tfvar_export.engine.engine import ProgressCallback
    from tfvar_export.engine.types import SyncPlan, SyncResult, VariableTarget

logger = logging.getLogger(__name__)

__all__ = [
    "Config",
    "ConfigError",
    "ProviderSettings",
    "SyncOptions",
    "list_workspaces",
    "load",
    "load_config",
    "plan",
    "provider_from_config",
    "sync",
]


def load(
    path: Path | str | None = None,
    *,
    provider_overrides: dict[str, Any] | None = None,
    sync_overrides: dict[str, Any] | None = None,
) -> Config:
    """Load configuration (optional YAML file + environment)."""
    return load_config(
        path, provider_overrides=provider_overrides, sync_overrides=sync_overrides
    )


def provider_from_config(
    config: Config, *, limiter: RateLimiter | None = None
) -> TerraformProvider:
    """Build a ``TerraformProvider`` from a ``Config`` instance.

    One provider (and so one rate limiter) is shared by every request of a run.
    """
    p = config.provider
    if not p.organization_name:
        raise ConfigError(
            "provider.organization_name is required (set TFVE_ORGANIZATION_NAME env var)"
        )
    if p.token is None or not p.token.get_secret_value():
        raise ConfigError("provider.token is required (set TFVE_TOKEN env var)")
    provider = TerraformProvider(
        base_url=p.base_url,
        organization=p.organization_name,
        auth=TokenAuth(token=p.token),
        timeout=p.timeout,
        page_size=p.page_size,
        limiter=limiter if limiter is not None else RateLimiter(p.rate_limit, p.rate_window),
    )
    provider.session.verify = p.verify_ssl
    return provider


def _workspace_ids(provider: TerraformProvider, config: Config) -> dict[str, str]:
    names = config.sync.workspaces
    if not names:
        raise ConfigError("No target workspace (use --target-workspaces or sync.workspaces)")
    return provider.workspaces.resolve_many(names)


def list_workspaces(config: Config) -> list[Workspace]:
    """List the organization's workspaces with their projects."""
    return provider_from_config(config).workspaces.workspaces()


def plan(
    config: Config,
    targets: Sequence[VariableTarget],
    *,
    provider: TerraformProvider | None = None,
) -> dict[str, SyncPlan]:
    """Plan the sync of *targets* into every configured workspace (no mutation)."""
    check_unique_names(targets)
    provider = provider or provider_from_config(config)
    engine = SyncEngine(provider.variables, allow_update=config.sync.allow_update)
    return {
        name: engine.plan(targets, ws_id)
        for name, ws_id in _workspace_ids(provider, config).items()
    }


def sync(
    config: Config,
    targets: Sequence[VariableTarget],
    *,
    provider: TerraformProvider | None = None,
    progress: ProgressCallback | None = None,
) -> dict[str, SyncResult]:
    """Sync *targets* into every configured workspace, one after the other.

    A workspace whose variables cannot be listed gets a failed result and
    the remaining workspaces still run.
    """
    check_unique_names(targets)
    provider = provider or provider_from_config(config)
    engine = SyncEngine(
        provider.variables,
        allow_update=config.sync.allow_update,
        continue_on_error=config.sync.continue_on_error,
    )
    results: dict[str, SyncResult] = {}
    for name, ws_id in _workspace_ids(provider, config).items():
        logger.info("Syncing %d variables into workspace %s (%s)", len(targets), name, ws_id)
        results[name] = engine.sync(targets, ws_id, progress=progress)
    return results
