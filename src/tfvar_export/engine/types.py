"""Engine types (targets, remote variables, plans, results)."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, JsonValue


class Action(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    IGNORE = "ignore"


class SyncPhase(str, Enum):
    LISTING = "listing"
    PARTITIONING = "partitioning"
    CREATING = "creating"
    UPDATING = "updating"
    SKIPPING_UPDATE = "skipping-update"
    DONE = "done"
    FAILED = "failed"


class VariableTarget(BaseModel):
    """A variable to export: the merge of one output with one export-list entry."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str | None = None
    value: JsonValue


class RemoteVariable(BaseModel):
    """A workspace variable as stored by the server.

    ``sensitive`` variables are write-only: the server never returns their
    value, so ``raw_value`` is empty.
    """

    id: str
    name: str
    is_hcl: bool = False
    raw_value: str = ""
    description: str | None = None
    category: str = "terraform"
    sensitive: bool = False


class VariableStatus(BaseModel):
    name: str
    remote_id: str | None = None

    @property
    def exists(self) -> bool:
        return self.remote_id is not None


class SyncedVariable(BaseModel):
    """A variable the server accepted, with the value it echoed back."""

    name: str
    remote_id: str
    value: JsonValue


class ItemFailure(BaseModel):
    name: str
    action: Action
    error: str


class SyncPlan(BaseModel):
    """Partition of the targets against one snapshot of remote variables."""

    workspace_id: str
    allow_update: bool
    statuses: list[VariableStatus] = Field(default_factory=list)
    to_create: list[VariableTarget] = Field(default_factory=list)
    existing: list[VariableTarget] = Field(default_factory=list)
    remote_ids: dict[str, str] = Field(default_factory=dict)

    @property
    def to_update(self) -> list[VariableTarget]:
        return list(self.existing) if self.allow_update else []

    @property
    def ignored(self) -> list[VariableTarget]:
        return [] if self.allow_update else list(self.existing)

    def has_changes(self) -> bool:
        return bool(self.to_create or self.to_update)

    def summary(self) -> dict[str, int]:
        return {
            Action.CREATE.value: len(self.to_create),
            Action.UPDATE.value: len(self.to_update),
            Action.IGNORE.value: len(self.ignored),
        }


class SyncResult(BaseModel):
    """Outcome of one workspace run.

    ``phase`` is the terminal phase (``done`` or ``failed``); ``failed_phase``
    tells where a failed run first went wrong.  ``error`` holds a run-level fault (the
    listing could not be read), as opposed to per-item ``failed`` entries.
    """

    workspace_id: str
    phase: SyncPhase = SyncPhase.LISTING
    failed_phase: SyncPhase | None = None
    error: str | None = None
    created: list[SyncedVariable] = Field(default_factory=list)
    updated: list[SyncedVariable] = Field(default_factory=list)
    ignored_existing: set[str] = Field(default_factory=set)
    failed: list[ItemFailure] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed and self.error is None

    def summary(self) -> dict[str, int]:
        return {
            "create": len(self.created),
            "update": len(self.updated),
            "ignore": len(self.ignored_existing),
            "failed": len(self.failed) + (0 if self.error is None else 1),
            "skipped": len(self.skipped),
        }
