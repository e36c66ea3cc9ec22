"""Map exceptions to clean stderr messages and exit codes."""

from __future__ import annotations

import typer

_STATUS_HINTS = {
    401: "check TFVE_TOKEN",
    403: "the token lacks permission on this workspace",
    404: "check the organization and workspace names",
    429: "rate limited by the server; lower TFVE_RATE_LIMIT and re-run",
}


def _err(msg: str, *, fg: str | None) -> None:
    """Print a styled message to stderr."""
    typer.echo(typer.style(msg, fg=fg), err=True)


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print a clean error message to stderr and return an exit code.

    All errors map to exit code 1.  No tracebacks are printed.
    """
    from tfvar_export.config.loader import ConfigError
    from tfvar_export.errors import ApiError, InputError, WorkspaceNotFoundError

    fg = typer.colors.RED if color else None

    if isinstance(exc, ConfigError):
        _err(f"Configuration error: {exc}", fg=fg)
    elif isinstance(exc, InputError):
        _err(f"Input error: {exc}", fg=fg)
        _err("  No variable was changed.", fg=fg)
    elif isinstance(exc, WorkspaceNotFoundError):
        _err(f"Unknown workspace: {exc.name}", fg=fg)
    elif isinstance(exc, ApiError):
        _err(f"API error: {exc}", fg=fg)
        hint = _STATUS_HINTS.get(exc.status) if exc.status is not None else None
        if hint:
            _err(f"  Hint: {hint}.", fg=fg)
    else:
        _err(f"Error: {exc}", fg=fg)

    return 1
