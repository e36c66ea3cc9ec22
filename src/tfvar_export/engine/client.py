"""Workspace variables client.

**API reference:** https://developer.hashicorp.com/terraform/cloud-docs/api-docs/workspace-variables
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from tfvar_export.engine import codec
from tfvar_export.engine.types import RemoteVariable
from tfvar_export.errors import ApiError

if TYPE_CHECKING:
    from tfvar_export.core.provider import TerraformProvider
    from tfvar_export.engine.types import VariableTarget

logger = logging.getLogger(__name__)


VARIABLE_CATEGORY = "terraform"


def _vars_path(workspace_id: str) -> str:
    return f"/workspaces/{workspace_id}/vars"


def _parse_variable(item: Any, *, method: str, url: str) -> RemoteVariable:
    """Build a :class:`RemoteVariable` from one JSON:API ``vars`` record."""
    if not isinstance(item, dict):
        raise ApiError("variable record is not an object", method=method, url=url)
    attrs = item.get("attributes")
    var_id = item.get("id")
    if not isinstance(var_id, str) or not isinstance(attrs, dict) or "key" not in attrs:
        raise ApiError("variable record lacks 'id' or 'attributes.key'", method=method, url=url)
    raw = attrs.get("value")
    return RemoteVariable(
        id=var_id,
        name=attrs["key"],
        is_hcl=bool(attrs.get("hcl", False)),
        raw_value="" if raw is None else str(raw),
        description=attrs.get("description"),
        category=attrs.get("category") or VARIABLE_CATEGORY,
        # Sensitive values come back as null.
        sensitive=attrs.get("sensitive") is True or raw is None,
    )


class RemoteVariableClient:
    """CRUD for the variables of a workspace.

    The only component doing network I/O against the variables endpoint.  All
    requests are paced by the provider's shared rate limiter.  Unexpected
    statuses raise :class:`ApiError` and are never retried here.
    """

    def __init__(self, provider: TerraformProvider) -> None:
        self._provider = provider

    @staticmethod
    def payload(target: VariableTarget, *, var_id: str | None = None) -> dict[str, Any]:
        """Build the JSON:API document for *target*."""
        kind = codec.classify(target.value)
        data: dict[str, Any] = {
            "type": "vars",
            "attributes": {
                "key": target.name,
                "value": codec.encode(target.value),
                "description": target.description or "",
                "category": VARIABLE_CATEGORY,
                "hcl": kind.is_hcl,
            },
        }
        if var_id is not None:
            data["id"] = var_id
        return {"data": data}

    def list(self, workspace_id: str) -> dict[str, RemoteVariable]:
        """Return the Terraform variables of the workspace keyed by name.

        Environment variables live in their own namespace (the same key may
        exist in both) and are left out.  Follows pagination links when the
        server returns any.
        """
        path = _vars_path(workspace_id)
        result: dict[str, RemoteVariable] = {}
        for item in self._provider.paginate(path):
            var = _parse_variable(item, method="GET", url=path)
            if var.category != VARIABLE_CATEGORY:
                logger.debug("Skipping %s variable %s", var.category, var.name)
                continue
            result[var.name] = var
        logger.info("%d variables found in workspace %s", len(result), workspace_id)
        return result

    def _send_one(
        self, method: str, path: str, *, expected: int, payload: dict[str, Any]
    ) -> RemoteVariable:
        body = self._provider.request(method, path, expected=expected, json=payload)
        if body is None:
            raise ApiError("empty response body", method=method, url=path, status=expected)
        return _parse_variable(body.get("data"), method=method, url=path)

    def create(self, workspace_id: str, target: VariableTarget) -> RemoteVariable:
        """Create a variable; expects ``201 Created``."""
        var = self._send_one(
            "POST", _vars_path(workspace_id), expected=201, payload=self.payload(target)
        )
        logger.debug("Created %s (%s)", var.name, var.id)
        return var

    def update(self, workspace_id: str, var_id: str, target: VariableTarget) -> RemoteVariable:
        """Update a variable in place; expects ``200 OK``."""
        var = self._send_one(
            "PATCH",
            f"{_vars_path(workspace_id)}/{var_id}",
            expected=200,
            payload=self.payload(target, var_id=var_id),
        )
        logger.debug("Updated %s (%s)", var.name, var.id)
        return var

    def delete(self, workspace_id: str, var_id: str) -> None:
        """Delete a variable; expects ``204 No Content``."""
        self._provider.request("DELETE", f"{_vars_path(workspace_id)}/{var_id}", expected=204)
        logger.debug("Deleted %s", var_id)
