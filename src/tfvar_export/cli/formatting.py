"""Plan and sync output rendering (Terraform-style)."""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import typer

from tfvar_export.engine import codec
from tfvar_export.engine.types import Action

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from tfvar_export.core.workspaces import Workspace
    from tfvar_export.engine.types import SyncPlan, SyncResult, VariableTarget
    from tfvar_export.sources.outputs import OutputValue


class _ActionStyle(NamedTuple):
    color: str
    symbol: str
    progress_verb: str
    done_verb: str


_ACTION_STYLES: dict[str, _ActionStyle] = {
    "create": _ActionStyle("green", "+", "Creating", "Creation complete"),
    "update": _ActionStyle("yellow", "~", "Updating", "Update complete"),
    "ignore": _ActionStyle("bright_black", "!", "", ""),
}

_ACTION_DESC: dict[str, str] = {
    "create": "will be created",
    "update": "will be updated in-place",
    "ignore": "already exists (update not allowed)",
}


def styler(color: bool) -> Callable[..., str]:
    """Return ``typer.style`` when *color* is True, otherwise a passthrough."""
    if color:
        return typer.style
    return lambda text, **_kw: text


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _format_value(target: VariableTarget) -> str:
    """Format a target value the way it will be sent."""
    raw = codec.encode(target.value)
    if codec.classify(target.value).is_string:
        return f'"{raw}"'
    return raw


def _format_target(target: VariableTarget, action: Action, *, color: bool) -> str:
    style = styler(color)
    s = _ACTION_STYLES[action.value]
    lines = [style(f"  # {target.name} {_ACTION_DESC[action.value]}", bold=True, fg=s.color)]
    if action != Action.IGNORE:
        hcl = codec.classify(target.value).is_hcl
        attrs = {
            "value": _format_value(target),
            "hcl": str(hcl).lower(),
        }
        if target.description:
            attrs["description"] = f'"{target.description}"'
        width = max(len(k) for k in attrs)
        lines.append(style(f'  {s.symbol} variable "{target.name}" {{', fg=s.color))
        lines.extend(
            style(f"      {s.symbol} {k.ljust(width)} = {v}", fg=s.color) for k, v in attrs.items()
        )
        lines.append(style("    }", fg=s.color))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Plan rendering
# ---------------------------------------------------------------------------


def format_plan(workspace: str, plan: SyncPlan, *, color: bool = True) -> str:
    """Render one workspace's plan as Terraform-style blocks."""
    style = styler(color)
    header = style(f'Workspace "{workspace}" ({plan.workspace_id})', bold=True)
    blocks = [
        *(_format_target(t, Action.CREATE, color=color) for t in plan.to_create),
        *(_format_target(t, Action.UPDATE, color=color) for t in plan.to_update),
        *(_format_target(t, Action.IGNORE, color=color) for t in plan.ignored),
    ]
    if not blocks:
        return f"{header}\nNo changes. Variables are up-to-date."
    return header + "\n\n" + "\n\n".join(blocks)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

_PLAN_VERBS = ("to add", "to change", "ignored")
_SYNC_VERBS = ("added", "changed", "ignored")
_SUMMARY_COLORS = ("green", "yellow", "bright_black")


def _format_summary(summary: dict[str, int], verbs: tuple[str, ...], *, color: bool) -> str:
    """Build the ``N verb, N verb, N verb`` part of a summary line."""
    style = styler(color)
    counts = (summary.get("create", 0), summary.get("update", 0), summary.get("ignore", 0))
    parts = [
        style(f"{n} {verb}", fg=fg) if n and color else f"{n} {verb}"
        for n, verb, fg in zip(counts, verbs, _SUMMARY_COLORS, strict=True)
    ]
    return ", ".join(parts)


def merge_summaries(summaries: Sequence[dict[str, int]]) -> dict[str, int]:
    """Add up per-workspace summary counts."""
    total: dict[str, int] = {}
    for s in summaries:
        for k, n in s.items():
            total[k] = total.get(k, 0) + n
    return total


def format_plan_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Plan: 2 to add, 1 to change, 0 ignored.``"""
    return f"Plan: {_format_summary(summary, _PLAN_VERBS, color=color)}."


def format_result(workspace: str, result: SyncResult, *, color: bool = True) -> str:
    """Render the outcome of one workspace sync, failures included."""
    style = styler(color)
    lines = [style(f'Workspace "{workspace}" ({result.workspace_id})', bold=True)]
    if result.error:
        lines.append(style(f"  x listing failed: {result.error}", fg="red"))
    for v in result.created:
        lines.append(f"  + {v.name} = {codec.encode(v.value)} ({v.remote_id})")
    for v in result.updated:
        lines.append(f"  ~ {v.name} = {codec.encode(v.value)} ({v.remote_id})")
    for name in sorted(result.ignored_existing):
        lines.append(style(f"  ! {name}: already exists, update not allowed", fg="yellow"))
    for f in result.failed:
        lines.append(style(f"  x {f.name}: {f.action.value} failed: {f.error}", fg="red"))
    if result.skipped:
        lines.append(
            style(f"  Not attempted (safe to re-run): {', '.join(result.skipped)}", fg="red")
        )
    return "\n".join(lines)


def format_sync_summary(summary: dict[str, int], *, color: bool = True) -> str:
    """Render ``Sync complete! Variables: 2 added, 0 changed, 1 ignored.``"""
    style = styler(color)
    failed = summary.get("failed", 0)
    body = f"Variables: {_format_summary(summary, _SYNC_VERBS, color=color)}"
    if failed:
        header = style("Sync finished with errors!", fg="red", bold=True)
        return f"{header} {body}, {failed} failed."
    header = style("Sync complete!", fg="green", bold=True)
    return f"{header} {body}."


# ---------------------------------------------------------------------------
# Listings
# ---------------------------------------------------------------------------


def format_workspaces(workspaces: Sequence[Workspace]) -> str:
    """Render workspaces as aligned ``name  id  project`` rows."""
    if not workspaces:
        return "No workspaces found."
    rows = [("WORKSPACE", "ID", "PROJECT")] + [
        (w.name, w.id, w.project.name if w.project else "-") for w in workspaces
    ]
    widths = [max(len(r[i]) for r in rows) for i in range(2)]
    return "\n".join(
        f"{r[0].ljust(widths[0])}  {r[1].ljust(widths[1])}  {r[2]}".rstrip() for r in rows
    )


def format_outputs(outputs: Sequence[OutputValue]) -> str:
    """Render outputs with the wire encoding they would be exported with."""
    if not outputs:
        return "No exportable outputs."
    width = max(len(o.name) for o in outputs)
    lines = []
    for o in outputs:
        hcl = "hcl" if codec.classify(o.value).is_hcl else "   "
        lines.append(f"{o.name.ljust(width)}  {hcl}  {codec.encode(o.value)}")
    return "\n".join(lines)
