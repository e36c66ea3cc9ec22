"""Error types."""

from __future__ import annotations


class TfvarExportError(Exception):
    """Base exception for tfvar-export errors."""


class InputError(TfvarExportError):
    """Raised for malformed or inconsistent local input files.

    Always raised before any remote mutation takes place.
    """


class NoEntriesError(InputError):
    """Raised when an export list yields zero usable records."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No entry found in export list: {path}")
        self.path = path


class DuplicateTargetError(InputError):
    """Raised when two targets share the same variable name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Duplicate variable name: {name}")
        self.name = name


class MissingOutputError(InputError):
    """Raised when the export list references an unknown (or sensitive) output."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Output '{name}' not found in outputs file (or it is sensitive)")
        self.name = name


class ApiError(TfvarExportError):
    """Raised for unexpected responses from the remote API."""

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        status: int | None = None,
    ) -> None:
        prefix = f"{method} {url}" if method and url else ""
        if status is not None:
            prefix = f"{prefix} -> {status}" if prefix else str(status)
        super().__init__(f"{prefix}: {message}" if prefix else message)
        self.method = method
        self.url = url
        self.status = status


class CodecError(TfvarExportError):
    """Raised when a value cannot be encoded or decoded."""


class WorkspaceNotFoundError(TfvarExportError):
    """Raised when a workspace name does not resolve to an ID."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workspace not found: {name}")
        self.name = name
