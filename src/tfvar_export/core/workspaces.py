"""Workspace and project discovery for an organization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from tfvar_export.errors import ApiError, WorkspaceNotFoundError

if TYPE_CHECKING:
    from tfvar_export.core.provider import TerraformProvider

logger = logging.getLogger(__name__)


class Project(BaseModel):
    id: str
    name: str


class Workspace(BaseModel):
    id: str
    name: str
    project: Project | None = None


def _project_id(item: dict[str, Any]) -> str | None:
    """Extract ``relationships.project.data.id`` from a workspace record."""
    rel = (item.get("relationships") or {}).get("project") or {}
    data = rel.get("data") or {}
    return data.get("id")


class WorkspaceDirectory:
    """Lists projects and workspaces of the provider's organization."""

    def __init__(self, provider: TerraformProvider) -> None:
        self._provider = provider

    def _org_path(self, suffix: str) -> str:
        org = self._provider.organization
        if not org:
            raise ValueError("An organization name is required to list workspaces")
        return f"/organizations/{org}/{suffix}"

    def _listing(self, suffix: str) -> list[dict[str, Any]]:
        path = self._org_path(suffix)
        items = list(
            self._provider.paginate(path, params={"page[size]": self._provider.page_size})
        )
        for item in items:
            if not isinstance(item, dict) or "id" not in item:
                raise ApiError("record lacks 'id'", method="GET", url=path)
        return items

    def projects(self) -> dict[str, str]:
        """Return ``{project_id: project_name}``."""
        result = {
            item["id"]: (item.get("attributes") or {}).get("name", "")
            for item in self._listing("projects")
        }
        logger.info("%d projects found", len(result))
        return result

    def workspaces(self) -> list[Workspace]:
        """Return every workspace joined with its project."""
        projects = self.projects()
        result: list[Workspace] = []
        for item in self._listing("workspaces"):
            project_id = _project_id(item)
            project = None
            if project_id is not None:
                project = Project(id=project_id, name=projects.get(project_id, ""))
            result.append(
                Workspace(
                    id=item["id"],
                    name=(item.get("attributes") or {}).get("name", ""),
                    project=project,
                )
            )
        logger.info("%d workspaces found", len(result))
        return result

    def resolve(self, name: str) -> str:
        """Return the ID of the workspace called *name*.

        Raises:
            WorkspaceNotFoundError: If no workspace has that name.
        """
        return self.resolve_many([name])[name]

    def resolve_many(self, names: list[str]) -> dict[str, str]:
        """Resolve several names with a single listing, preserving input order."""
        by_name = {ws.name: ws.id for ws in self.workspaces()}
        resolved: dict[str, str] = {}
        for name in names:
            if name not in by_name:
                raise WorkspaceNotFoundError(name)
            resolved[name] = by_name[name]
        return resolved
