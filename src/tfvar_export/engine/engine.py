"""Sync engine: list, partition, then create and (optionally) update."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

from tfvar_export.engine import codec
from tfvar_export.engine.types import (
    Action,
    ItemFailure,
    SyncedVariable,
    SyncPhase,
    SyncPlan,
    SyncResult,
    VariableStatus,
)
from tfvar_export.errors import ApiError, CodecError, DuplicateTargetError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[["VariableTarget", Action, Literal["start", "done", "failed"]], None]

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tfvar_export.engine.client import RemoteVariableClient
    from tfvar_export.engine.types import RemoteVariable, VariableTarget


def check_unique_names(targets: Sequence[VariableTarget]) -> None:
    """Raise :class:`DuplicateTargetError` if two targets share a name."""
    seen: set[str] = set()
    for t in targets:
        if t.name in seen:
            raise DuplicateTargetError(t.name)
        seen.add(t.name)


def variable_statuses(
    targets: Sequence[VariableTarget], remote: dict[str, RemoteVariable]
) -> list[VariableStatus]:
    """Match each target name against a snapshot of remote variables."""
    statuses: list[VariableStatus] = []
    for t in targets:
        var = remote.get(t.name)
        statuses.append(VariableStatus(name=t.name, remote_id=var.id if var else None))
    return statuses


class SyncEngine:
    """Reconcile export targets with the variables of one workspace.

    A run goes ``listing -> partitioning -> creating -> (updating |
    skipping-update) -> done``.  The remote snapshot is taken once, at
    listing time, and never re-queried.  Calls are strictly sequential and
    follow input order, creates before updates.

    Per-item failures do not raise: they are collected in
    :attr:`SyncResult.failed`.  By default the run stops at the first failure
    and the untouched names are reported in :attr:`SyncResult.skipped`; with
    ``continue_on_error`` every item is attempted.  Nothing is rolled back.
    """

    def __init__(
        self,
        client: RemoteVariableClient,
        *,
        allow_update: bool = False,
        continue_on_error: bool = False,
    ) -> None:
        self._client = client
        self._allow_update = allow_update
        self._continue_on_error = continue_on_error

    @property
    def allow_update(self) -> bool:
        return self._allow_update

    def _partition(
        self,
        targets: Sequence[VariableTarget],
        workspace_id: str,
        remote: dict[str, RemoteVariable],
    ) -> SyncPlan:
        statuses = variable_statuses(targets, remote)
        plan = SyncPlan(
            workspace_id=workspace_id,
            allow_update=self._allow_update,
            statuses=statuses,
        )
        for t, status in zip(targets, statuses, strict=True):
            if status.remote_id is None:
                plan.to_create.append(t)
            else:
                plan.existing.append(t)
                plan.remote_ids[t.name] = status.remote_id

        logger.info(
            "Planned %d to create, %d existing (update %s)",
            len(plan.to_create),
            len(plan.existing),
            "allowed" if self._allow_update else "not allowed",
        )
        return plan

    def plan(self, targets: Sequence[VariableTarget], workspace_id: str) -> SyncPlan:
        """List remote variables and partition *targets* against them.

        Raises:
            DuplicateTargetError: Before any request, if target names collide.
            ApiError: If listing fails.
        """
        check_unique_names(targets)
        logger.info("Listing variables of workspace %s", workspace_id)
        return self._partition(targets, workspace_id, self._client.list(workspace_id))

    def _run_item(
        self,
        target: VariableTarget,
        action: Action,
        workspace_id: str,
        remote_id: str | None,
        progress: ProgressCallback | None,
    ) -> SyncedVariable:
        if progress:
            progress(target, action, "start")
        kind = codec.classify(target.value)
        if action == Action.CREATE:
            var = self._client.create(workspace_id, target)
        elif remote_id is None:
            raise ValueError(f"Cannot update {target.name}: no remote id in plan")
        else:
            var = self._client.update(workspace_id, remote_id, target)
        if var.sensitive:
            # Write-only on the server; report what was sent.
            value = target.value
        else:
            value = codec.decode(var.is_hcl, kind.is_string, var.raw_value)
        if progress:
            progress(target, action, "done")
        return SyncedVariable(name=var.name, remote_id=var.id, value=value)

    def _run_phase(
        self,
        items: list[VariableTarget],
        action: Action,
        plan: SyncPlan,
        result: SyncResult,
        out: list[SyncedVariable],
        progress: ProgressCallback | None,
    ) -> bool:
        """Run one phase in order. Returns False if the run must stop."""
        for i, target in enumerate(items):
            remote_id = plan.remote_ids.get(target.name)
            try:
                out.append(self._run_item(target, action, plan.workspace_id, remote_id, progress))
            except (ApiError, CodecError) as exc:
                logger.error("Failed to %s variable %s: %s", action.value, target.name, exc)
                result.failed.append(ItemFailure(name=target.name, action=action, error=str(exc)))
                if result.failed_phase is None:
                    result.failed_phase = result.phase
                if progress:
                    progress(target, action, "failed")
                if not self._continue_on_error:
                    result.skipped.extend(t.name for t in items[i + 1 :])
                    return False
        return True

    def _fail(self, result: SyncResult) -> SyncResult:
        if result.failed_phase is None:
            result.failed_phase = result.phase
        result.phase = SyncPhase.FAILED
        return result

    def _apply(
        self, plan: SyncPlan, result: SyncResult, progress: ProgressCallback | None
    ) -> SyncResult:
        result.phase = SyncPhase.CREATING
        created_ok = self._run_phase(
            plan.to_create, Action.CREATE, plan, result, result.created, progress
        )
        if not created_ok:
            result.skipped.extend(t.name for t in plan.to_update)
            result.ignored_existing = {t.name for t in plan.ignored}
            return self._fail(result)
        logger.info("Variables created: %d", len(result.created))

        if plan.allow_update:
            result.phase = SyncPhase.UPDATING
            updated_ok = self._run_phase(
                plan.to_update, Action.UPDATE, plan, result, result.updated, progress
            )
            logger.info("Variables updated: %d", len(result.updated))
        else:
            result.phase = SyncPhase.SKIPPING_UPDATE
            updated_ok = True
            result.ignored_existing = {t.name for t in plan.ignored}
            if result.ignored_existing:
                logger.warning(
                    "Variables already exist and update is not allowed: %s",
                    ", ".join(t.name for t in plan.ignored),
                )

        if not updated_ok or result.failed:
            return self._fail(result)
        result.phase = SyncPhase.DONE
        return result

    def apply(self, plan: SyncPlan, *, progress: ProgressCallback | None = None) -> SyncResult:
        """Apply a plan: creates first, then updates or ignores existing names."""
        result = SyncResult(workspace_id=plan.workspace_id, phase=SyncPhase.PARTITIONING)
        return self._apply(plan, result, progress)

    def sync(
        self,
        targets: Sequence[VariableTarget],
        workspace_id: str,
        *,
        progress: ProgressCallback | None = None,
    ) -> SyncResult:
        """Run every phase for one workspace.

        A listing failure does not raise: the result is ``failed`` with
        ``failed_phase == listing``, ``error`` set and every target skipped.

        Raises:
            DuplicateTargetError: Before any request, if target names collide.
        """
        check_unique_names(targets)
        result = SyncResult(workspace_id=workspace_id, phase=SyncPhase.LISTING)
        logger.info("Listing variables of workspace %s", workspace_id)
        try:
            remote = self._client.list(workspace_id)
        except ApiError as exc:
            logger.error("Failed to list variables of workspace %s: %s", workspace_id, exc)
            result.error = str(exc)
            result.skipped = [t.name for t in targets]
            return self._fail(result)

        result.phase = SyncPhase.PARTITIONING
        plan = self._partition(targets, workspace_id, remote)
        return self._apply(plan, result, progress)
