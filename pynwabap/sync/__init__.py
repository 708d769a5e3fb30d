"""Sync engine for PyNWABAP - one-way deployment into a BSP container."""

from .comparator import ArtifactComparator, ChangeItem, Disposition
from .engine import SyncEngine, SyncResult
from .executor import ExecutionResult, SyncExecutor
from .operations import SyncOperations
from .planner import order_changes
from .scanner import RemoteTreeWalker, resolve_local_artifacts
from .target import SyncTarget

__all__ = [
    "SyncEngine",
    "SyncResult",
    "SyncTarget",
    "SyncOperations",
    "SyncExecutor",
    "ExecutionResult",
    "ArtifactComparator",
    "ChangeItem",
    "Disposition",
    "RemoteTreeWalker",
    "resolve_local_artifacts",
    "order_changes",
]
