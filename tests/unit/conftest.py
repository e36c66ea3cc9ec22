"""Shared fixtures for unit tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest

from tfvar_export.core import TerraformProvider

if TYPE_CHECKING:
    from collections.abc import Callable

_TFVE_ENV_VARS = (
    "TFVE_BASE_URL",
    "TFVE_ORGANIZATION_NAME",
    "TFVE_TOKEN",
    "TFVE_VERIFY_SSL",
    "TFVE_TIMEOUT",
    "TFVE_PAGE_SIZE",
    "TFVE_RATE_LIMIT",
    "TFVE_RATE_WINDOW",
    "TFVE_LOG",
)


@pytest.fixture(autouse=True)
def _clean_tfve_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove TFVE_* env vars so unit tests don't leak host config."""
    for var in _TFVE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def _response(status: int, body: Any = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    text = "" if body is None else (body if isinstance(body, str) else json.dumps(body))
    resp.text = text
    resp.content = text.encode("utf-8")
    resp.json.side_effect = lambda: json.loads(text)
    return resp


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory fixture: build a ``requests.Response`` double."""
    return _response


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def provider(session: MagicMock) -> TerraformProvider:
    return TerraformProvider.from_session(session, organization="my-org")


def var_record(
    var_id: str, key: str, value: str, *, hcl: bool = False, description: str = ""
) -> dict[str, Any]:
    return {
        "id": var_id,
        "type": "vars",
        "attributes": {
            "key": key,
            "value": value,
            "description": description,
            "category": "terraform",
            "hcl": hcl,
            "sensitive": False,
        },
    }


@pytest.fixture
def make_var() -> Callable[..., dict[str, Any]]:
    """Factory fixture: build a JSON:API ``vars`` record."""
    return var_record
