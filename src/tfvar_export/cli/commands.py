"""CLI command implementations."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import typer

from tfvar_export.cli import app
from tfvar_export.cli.errors import handle_error

if TYPE_CHECKING:
    from tfvar_export.config.schema import Config
    from tfvar_export.engine.types import Action, SyncResult, VariableTarget

ConfigPath = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Optional YAML configuration file."),
]

BaseUrl = Annotated[
    str | None,
    typer.Option(
        "--base-url",
        "-b",
        help="Base URL of the Terraform API [default: https://app.terraform.io].",
    ),
]

TargetWorkspaces = Annotated[
    str | None,
    typer.Option(
        "--target-workspaces",
        "-t",
        metavar="WORKSPACE_NAME1,WORKSPACE_NAME2,...",
        help="Comma separated workspace names.",
    ),
]

AllowUpdate = Annotated[
    bool,
    typer.Option("--allow-update", "-u", help="Allow update of existing variables."),
]

NoColor = Annotated[
    bool,
    typer.Option("--no-color", help="Disable colored output."),
]

OutputsFile = Annotated[
    Path,
    typer.Argument(help="Outputs file generated with `terraform output -json`."),
]

ExportList = Annotated[
    Path,
    typer.Argument(help="Export list: `output,variable[,description]` per line."),
]


def _use_color(no_color: bool) -> bool:
    """Determine whether to use color output."""
    return not (no_color or os.environ.get("NO_COLOR"))


def _load(
    config: Path | None,
    *,
    base_url: str | None = None,
    target_workspaces: str | None = None,
    allow_update: bool = False,
    keep_going: bool = False,
) -> Config:
    from tfvar_export.config import load

    # Flags left at their default must not mask values from the YAML file.
    return load(
        config,
        provider_overrides={"base_url": base_url},
        sync_overrides={
            "workspaces": target_workspaces,
            "allow_update": allow_update or None,
            "continue_on_error": keep_going or None,
        },
    )


def _sync_with_progress(
    cfg: Config, targets: list[VariableTarget], *, color: bool
) -> dict[str, SyncResult]:
    """Sync with a Rich progress spinner and per-variable status lines."""
    from rich.console import Console
    from rich.progress import Progress, SpinnerColumn, TextColumn

    from tfvar_export.cli.formatting import _ACTION_STYLES
    from tfvar_export.config import sync as sync_fn

    console = Console(no_color=not color, stderr=True)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Syncing", total=None)

        def on_progress(
            target: VariableTarget, action: Action, event: Literal["start", "done", "failed"]
        ) -> None:
            s = _ACTION_STYLES[action.value]
            if event == "start":
                progress.update(task, description=f"{target.name}: {s.progress_verb}...")
            elif event == "done":
                progress.console.print(f"  {target.name}: {s.done_verb}")
            else:
                progress.console.print(f"  {target.name}: {action.value} failed")

        return sync_fn(cfg, targets, progress=on_progress)


@app.command()
def workspaces(
    config: ConfigPath = None,
    base_url: BaseUrl = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print workspaces as JSON."),
    ] = False,
    no_color: NoColor = False,
) -> None:
    """Show available workspaces with their project."""
    from tfvar_export.cli.formatting import format_workspaces
    from tfvar_export.config import list_workspaces

    color = _use_color(no_color)
    try:
        cfg = _load(config, base_url=base_url)
        found = list_workspaces(cfg)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    if as_json:
        typer.echo(json.dumps([w.model_dump() for w in found], indent=2))
    else:
        typer.echo(format_workspaces(found))


@app.command()
def outputs(
    outputs_file: OutputsFile,
    no_color: NoColor = False,
) -> None:
    """Show exportable (non-sensitive) outputs and their wire encoding."""
    from tfvar_export.cli.formatting import format_outputs
    from tfvar_export.sources import get_outputs

    color = _use_color(no_color)
    try:
        found = get_outputs(outputs_file)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    typer.echo(format_outputs(found))


@app.command()
def plan(
    outputs_file: OutputsFile,
    export_list: ExportList,
    target_workspaces: TargetWorkspaces = None,
    allow_update: AllowUpdate = False,
    config: ConfigPath = None,
    base_url: BaseUrl = None,
    no_color: NoColor = False,
) -> None:
    """Show which variables a sync would create, update or ignore.

    Exits 0 when there is nothing to do, 2 when changes are pending.
    """
    from tfvar_export.cli.formatting import format_plan, format_plan_summary, merge_summaries
    from tfvar_export.config import plan as plan_fn
    from tfvar_export.sources import load_targets

    color = _use_color(no_color)
    try:
        cfg = _load(
            config,
            base_url=base_url,
            target_workspaces=target_workspaces,
            allow_update=allow_update,
        )
        targets = load_targets(outputs_file, export_list)
        plans = plan_fn(cfg, targets)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    for name, p in plans.items():
        typer.echo(format_plan(name, p, color=color))
        typer.echo()
    summary = merge_summaries([p.summary() for p in plans.values()])
    typer.echo(format_plan_summary(summary, color=color))

    if any(p.has_changes() for p in plans.values()):
        raise typer.Exit(2)


@app.command()
def sync(
    outputs_file: OutputsFile,
    export_list: ExportList,
    target_workspaces: TargetWorkspaces = None,
    allow_update: AllowUpdate = False,
    keep_going: Annotated[
        bool,
        typer.Option(
            "--keep-going",
            help="Attempt every variable even after a failure (default: stop at the first).",
        ),
    ] = False,
    config: ConfigPath = None,
    base_url: BaseUrl = None,
    no_color: NoColor = False,
) -> None:
    """Create missing workspace variables from Terraform outputs.

    Existing variables are only updated with ``--allow-update``.
    """
    from tfvar_export.cli.formatting import format_result, format_sync_summary, merge_summaries
    from tfvar_export.sources import load_targets

    color = _use_color(no_color)
    try:
        cfg = _load(
            config,
            base_url=base_url,
            target_workspaces=target_workspaces,
            allow_update=allow_update,
            keep_going=keep_going,
        )
        targets = load_targets(outputs_file, export_list)
        results = _sync_with_progress(cfg, targets, color=color)
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc

    for name, result in results.items():
        typer.echo(format_result(name, result, color=color))
        typer.echo()
    summary = merge_summaries([r.summary() for r in results.values()])
    typer.echo(format_sync_summary(summary, color=color))

    if not all(r.ok for r in results.values()):
        raise typer.Exit(1)
