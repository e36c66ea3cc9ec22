"""CLI application for tfvar-export."""

from __future__ import annotations

import logging
import os
import sys

import typer

from tfvar_export import __version__

app = typer.Typer(
    name="tfvar-export",
    help="Export Terraform outputs as HCP Terraform workspace variables.",
    no_args_is_help=True,
    add_completion=False,
)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_LOG_ENV = "TFVE_LOG"
# -v, -vv; -vvv also shows urllib3 connection logs.
_VERBOSITY = (logging.INFO, logging.DEBUG)
_HTTP_LOGGER = "urllib3"


def _show_version(value: bool) -> None:
    if not value:
        return
    typer.echo(f"tfvar-export {__version__}")
    raise typer.Exit


def _env_level() -> int | None:
    """Level named by ``TFVE_LOG``, or None when unset."""
    name = os.environ.get(_LOG_ENV, "").strip().upper()
    if not name:
        return None
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        typer.echo(f"WARNING: ignoring invalid {_LOG_ENV}={name!r}, using INFO", err=True)
        return logging.INFO
    return level


def _configure_logging(verbose: int) -> None:
    """Route ``tfvar_export`` logs to stderr; silent unless asked for."""
    level = _env_level()
    if level is None:
        if not verbose:
            return
        level = _VERBOSITY[min(verbose, len(_VERBOSITY)) - 1]
    logging.basicConfig(level=logging.WARNING, format=_LOG_FORMAT, stream=sys.stderr, force=True)
    logging.getLogger("tfvar_export").setLevel(level)
    if verbose > len(_VERBOSITY):
        logging.getLogger(_HTTP_LOGGER).setLevel(logging.DEBUG)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Print the tfvar-export version.",
        callback=_show_version,
        is_eager=True,
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="More logging on stderr: -v sync steps, -vv API calls, -vvv HTTP connections.",
    ),
) -> None:
    _ = version
    _configure_logging(verbose)


from tfvar_export.cli import commands as _commands  # noqa: E402, F401
