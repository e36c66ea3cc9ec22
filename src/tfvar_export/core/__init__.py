"""Core API connection components."""

from tfvar_export.core.provider import TerraformProvider, TokenAuth
from tfvar_export.core.workspaces import Project, Workspace, WorkspaceDirectory

__all__ = ["Project", "TerraformProvider", "TokenAuth", "Workspace", "WorkspaceDirectory"]
