"""Configuration loader (optional YAML file, environment, ``.env``)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from tfvar_export.config.schema import Config

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_PROVIDER_ENV_MAP: dict[str, str] = {
    "base_url": "TFVE_BASE_URL",
    "organization_name": "TFVE_ORGANIZATION_NAME",
    "token": "TFVE_TOKEN",
    "verify_ssl": "TFVE_VERIFY_SSL",
    "timeout": "TFVE_TIMEOUT",
    "page_size": "TFVE_PAGE_SIZE",
    "rate_limit": "TFVE_RATE_LIMIT",
    "rate_window": "TFVE_RATE_WINDOW",
}

_PROVIDER_BOOL_FIELDS: frozenset[str] = frozenset({"verify_ssl"})


def _resolve_provider(
    raw_provider: dict[str, Any], overrides: dict[str, Any], config_dir: Path
) -> dict[str, Any]:
    """Resolve provider fields from overrides, YAML, env vars, and ``.env`` file.

    Priority (highest wins): override > YAML value > env var > ``.env`` file.
    """
    unknown = set(raw_provider) - set(_PROVIDER_ENV_MAP)
    if unknown:
        raise ConfigError(f"Unknown provider setting(s): {', '.join(sorted(unknown))}")

    env_file = config_dir / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    resolved: dict[str, Any] = {}
    for field, env_key in _PROVIDER_ENV_MAP.items():
        val = overrides.get(field)
        if val is None:
            val = raw_provider.get(field)
        if val is None:
            val = os.environ.get(env_key)
        if val is None:
            val = dotenv_vals.get(env_key)
        if val is not None:
            if field in _PROVIDER_BOOL_FIELDS and isinstance(val, str):
                if val.lower() not in SafeConstructor.bool_values:
                    raise ConfigError(f"Invalid boolean for {env_key}: {val!r}")
                val = SafeConstructor.bool_values[val.lower()]
            resolved[field] = val

    return resolved


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    return raw


def load_config(
    path: Path | str | None = None,
    *,
    provider_overrides: dict[str, Any] | None = None,
    sync_overrides: dict[str, Any] | None = None,
) -> Config:
    """Build a ``Config`` from an optional YAML file plus the environment.

    Without *path*, ``.env`` is looked up in the current directory.  Override
    values of ``None`` are ignored so CLI flags can be passed through as-is.

    Raises:
        ConfigError: On YAML parse errors or validation failures.
    """
    config_dir = Path(path).parent if path is not None else Path()
    raw = _read_yaml(Path(path)) if path is not None else {}

    provider_over = {k: v for k, v in (provider_overrides or {}).items() if v is not None}
    sync_over = {k: v for k, v in (sync_overrides or {}).items() if v is not None}

    try:
        raw_sync = raw.get("sync") or {}
        if not isinstance(raw_sync, dict):
            raise ConfigError("'sync' must be a mapping")
        data = {
            "provider": _resolve_provider(raw.get("provider") or {}, provider_over, config_dir),
            "sync": {**raw_sync, **sync_over},
            "config_dir": config_dir,
        }
        config = Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    logger.info(
        "Loaded config%s (base_url=%s)",
        f" from {path}" if path is not None else "",
        config.provider.base_url,
    )
    return config
