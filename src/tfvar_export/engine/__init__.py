"""Variable synchronization engine."""

from tfvar_export.engine.codec import ValueClass, classify, decode, encode
from tfvar_export.engine.engine import ProgressCallback, SyncEngine
from tfvar_export.engine.ratelimit import RateLimiter
from tfvar_export.engine.types import (
    Action,
    ItemFailure,
    RemoteVariable,
    SyncedVariable,
    SyncPhase,
    SyncPlan,
    SyncResult,
    VariableStatus,
    VariableTarget,
)

__all__ = [
    "Action",
    "ItemFailure",
    "ProgressCallback",
    "RateLimiter",
    "RemoteVariable",
    "SyncEngine",
    "SyncPhase",
    "SyncPlan",
    "SyncResult",
    "SyncedVariable",
    "ValueClass",
    "VariableStatus",
    "VariableTarget",
    "classify",
    "decode",
    "encode",
]
