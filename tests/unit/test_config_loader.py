"""Tests for the YAML/environment configuration loader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tfvar_export.config.loader import ConfigError, _resolve_provider, load_config
from tfvar_export.core.provider import DEFAULT_BASE_URL

if TYPE_CHECKING:
    from pathlib import Path

_YAML = """\
provider:
  organization_name: acme
  base_url: https://tfe.example.com
  rate_limit: 10

sync:
  workspaces: [app, db]
  allow_update: true
"""


def _write(tmp_path: Path, content: str, name: str = "tfvar-export.yaml") -> Path:
    path = tmp_path / name
    path.write_text(content)
    return path


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        config = load_config()
        assert config.provider.base_url == DEFAULT_BASE_URL
        assert config.provider.organization_name is None
        assert config.provider.token is None
        assert config.provider.rate_limit == 20
        assert config.provider.rate_window == 1.0
        assert config.sync.workspaces == []
        assert config.sync.allow_update is False
        assert config.sync.continue_on_error is False

    def test_full_yaml(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, _YAML))
        assert config.provider.organization_name == "acme"
        assert config.provider.base_url == "https://tfe.example.com"
        assert config.provider.rate_limit == 10
        assert config.sync.workspaces == ["app", "db"]
        assert config.sync.allow_update is True
        assert config.config_dir == tmp_path

    def test_empty_yaml(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, ""))
        assert config.provider.base_url == DEFAULT_BASE_URL

    def test_comma_separated_workspaces(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, "sync:\n  workspaces: 'app, db ,'\n"))
        assert config.sync.workspaces == ["app", "db"]

    def test_sync_overrides_win_and_none_is_ignored(self, tmp_path: Path) -> None:
        config = load_config(
            _write(tmp_path, _YAML),
            sync_overrides={"workspaces": "other", "allow_update": None},
        )
        assert config.sync.workspaces == ["other"]
        assert config.sync.allow_update is True

    def test_token_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TFVE_TOKEN", "s3cret")
        config = load_config(_write(tmp_path, _YAML))
        assert config.provider.token is not None
        assert config.provider.token.get_secret_value() == "s3cret"
        assert "s3cret" not in repr(config)

    def test_dotenv_next_to_config_file(self, tmp_path: Path) -> None:
        _write(tmp_path, "TFVE_TOKEN=from-dotenv\nTFVE_PAGE_SIZE=50\n", name=".env")
        config = load_config(_write(tmp_path, _YAML))
        assert config.provider.token is not None
        assert config.provider.token.get_secret_value() == "from-dotenv"
        assert config.provider.page_size == 50

    def test_unknown_provider_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown provider setting"):
            load_config(_write(tmp_path, "provider:\n  hostname: x\n"))

    def test_unknown_sync_key_is_ignored(self, tmp_path: Path) -> None:
        config = load_config(_write(tmp_path, "sync:\n  workspaces: [a]\n  extra: 1\n"))
        assert config.sync.workspaces == ["a"]

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(_write(tmp_path, "provider: [unclosed\n"))

    def test_top_level_not_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))

    def test_sync_not_mapping(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="'sync' must be a mapping"):
            load_config(_write(tmp_path, "sync: yes please\n"))

    @pytest.mark.parametrize("page_size", [0, 101])
    def test_page_size_bounds(self, tmp_path: Path, page_size: int) -> None:
        with pytest.raises(ConfigError, match="page_size"):
            load_config(_write(tmp_path, f"provider:\n  page_size: {page_size}\n"))

    def test_rate_limit_must_be_positive(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="rate_limit"):
            load_config(_write(tmp_path, "provider:\n  rate_limit: 0\n"))


class TestResolveProvider:
    def test_priority(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write(
            tmp_path,
            "TFVE_BASE_URL=https://dotenv\nTFVE_ORGANIZATION_NAME=dotenv-org\n"
            "TFVE_TOKEN=dotenv-token\nTFVE_TIMEOUT=5\n",
            name=".env",
        )
        monkeypatch.setenv("TFVE_BASE_URL", "https://env")
        monkeypatch.setenv("TFVE_ORGANIZATION_NAME", "env-org")
        monkeypatch.setenv("TFVE_TOKEN", "env-token")

        resolved = _resolve_provider(
            {"base_url": "https://yaml", "organization_name": "yaml-org"},
            {"base_url": "https://override"},
            tmp_path,
        )
        assert resolved["base_url"] == "https://override"
        assert resolved["organization_name"] == "yaml-org"
        assert resolved["token"] == "env-token"
        assert resolved["timeout"] == "5"

    def test_unset_fields_are_omitted(self, tmp_path: Path) -> None:
        assert _resolve_provider({}, {}, tmp_path) == {}

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("false", False), ("False", False), ("no", False), ("off", False), ("true", True)],
    )
    def test_bool_from_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, raw: str, expected: bool
    ) -> None:
        monkeypatch.setenv("TFVE_VERIFY_SSL", raw)
        assert _resolve_provider({}, {}, tmp_path)["verify_ssl"] is expected

    def test_invalid_bool(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TFVE_VERIFY_SSL", "maybe")
        with pytest.raises(ConfigError, match="TFVE_VERIFY_SSL"):
            _resolve_provider({}, {}, tmp_path)

    def test_yaml_bool_kept_as_is(self, tmp_path: Path) -> None:
        assert _resolve_provider({"verify_ssl": False}, {}, tmp_path)["verify_ssl"] is False
