from __future__ import annotations

import re

from tfvar_export.cli.formatting import (
    format_outputs,
    format_plan,
    format_plan_summary,
    format_result,
    format_sync_summary,
    format_workspaces,
    merge_summaries,
)
from tfvar_export.core import Project, Workspace
from tfvar_export.engine.types import (
    Action,
    ItemFailure,
    SyncedVariable,
    SyncPhase,
    SyncPlan,
    SyncResult,
    VariableTarget,
)
from tfvar_export.sources import OutputValue


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class TestFormatPlanSummary:
    def test_all_zeros(self) -> None:
        result = format_plan_summary({"create": 0, "update": 0, "ignore": 0}, color=False)
        assert result == "Plan: 0 to add, 0 to change, 0 ignored."

    def test_with_counts(self) -> None:
        result = format_plan_summary({"create": 2, "update": 1, "ignore": 3}, color=False)
        assert result == "Plan: 2 to add, 1 to change, 3 ignored."

    def test_color_mode_contains_ansi(self) -> None:
        result = format_plan_summary({"create": 1, "update": 0, "ignore": 0}, color=True)
        assert "\x1b[" in result
        assert _strip_ansi(result) == "Plan: 1 to add, 0 to change, 0 ignored."


class TestFormatSyncSummary:
    def test_complete(self) -> None:
        result = format_sync_summary({"create": 2, "update": 0, "ignore": 1}, color=False)
        assert result == "Sync complete! Variables: 2 added, 0 changed, 1 ignored."

    def test_with_failures(self) -> None:
        result = format_sync_summary(
            {"create": 1, "update": 0, "ignore": 0, "failed": 2}, color=False
        )
        assert result == (
            "Sync finished with errors! Variables: 1 added, 0 changed, 0 ignored, 2 failed."
        )

    def test_merge(self) -> None:
        merged = merge_summaries([{"create": 1, "failed": 1}, {"create": 2, "ignore": 1}])
        assert merged == {"create": 3, "failed": 1, "ignore": 1}


class TestFormatPlan:
    def test_no_changes(self) -> None:
        plan = SyncPlan(workspace_id="ws-1", allow_update=False)
        assert format_plan("app", plan, color=False) == (
            'Workspace "app" (ws-1)\nNo changes. Variables are up-to-date.'
        )

    def test_create_block(self) -> None:
        plan = SyncPlan(
            workspace_id="ws-1",
            allow_update=False,
            to_create=[VariableTarget(name="nets", description="Subnets", value=["a", "b"])],
        )
        result = format_plan("app", plan, color=False)
        assert "  # nets will be created" in result
        assert '  + variable "nets" {' in result
        assert '      + value       = ["a","b"]' in result
        assert "      + hcl         = true" in result
        assert '      + description = "Subnets"' in result

    def test_string_value_is_quoted(self) -> None:
        plan = SyncPlan(
            workspace_id="ws-1",
            allow_update=True,
            existing=[VariableTarget(name="vpc", value="vpc-1")],
        )
        result = format_plan("app", plan, color=False)
        assert "  # vpc will be updated in-place" in result
        assert '      ~ value = "vpc-1"' in result
        assert "      ~ hcl   = false" in result

    def test_ignored_has_no_body(self) -> None:
        plan = SyncPlan(
            workspace_id="ws-1",
            allow_update=False,
            existing=[VariableTarget(name="vpc", value="vpc-1")],
        )
        result = format_plan("app", plan, color=False)
        assert "  # vpc already exists (update not allowed)" in result
        assert "variable" not in result

    def test_no_color_has_no_ansi(self) -> None:
        plan = SyncPlan(
            workspace_id="ws-1",
            allow_update=False,
            to_create=[VariableTarget(name="n", value=0)],
        )
        assert "\x1b[" not in format_plan("app", plan, color=False)


class TestFormatResult:
    def test_all_sections(self) -> None:
        result = SyncResult(
            workspace_id="ws-1",
            created=[SyncedVariable(name="a", remote_id="var-1", value={"k": 1})],
            updated=[SyncedVariable(name="b", remote_id="var-2", value=2)],
            ignored_existing={"d", "c"},
            failed=[ItemFailure(name="e", action=Action.UPDATE, error="boom")],
            skipped=["f", "g"],
        )
        lines = format_result("app", result, color=False).splitlines()
        assert lines == [
            'Workspace "app" (ws-1)',
            '  + a = {"k":1} (var-1)',
            "  ~ b = 2 (var-2)",
            "  ! c: already exists, update not allowed",
            "  ! d: already exists, update not allowed",
            "  x e: update failed: boom",
            "  Not attempted (safe to re-run): f, g",
        ]

    def test_listing_error(self) -> None:
        result = SyncResult(
            workspace_id="ws-2",
            phase=SyncPhase.FAILED,
            failed_phase=SyncPhase.LISTING,
            error="GET /vars -> 503: unavailable",
            skipped=["a", "b"],
        )
        assert format_result("db", result, color=False).splitlines() == [
            'Workspace "db" (ws-2)',
            "  x listing failed: GET /vars -> 503: unavailable",
            "  Not attempted (safe to re-run): a, b",
        ]


class TestListings:
    def test_workspaces_table(self) -> None:
        result = format_workspaces(
            [
                Workspace(id="ws-1", name="application", project=Project(id="p", name="net")),
                Workspace(id="ws-22", name="db"),
            ]
        )
        assert result.splitlines() == [
            "WORKSPACE    ID     PROJECT",
            "application  ws-1   net",
            "db           ws-22  -",
        ]

    def test_no_workspaces(self) -> None:
        assert format_workspaces([]) == "No workspaces found."

    def test_outputs(self) -> None:
        result = format_outputs(
            [OutputValue(name="nets", value=["a"]), OutputValue(name="n", value=3)]
        )
        assert result.splitlines() == ['nets  hcl  ["a"]', "n          3"]

    def test_no_outputs(self) -> None:
        assert format_outputs([]) == "No exportable outputs."
