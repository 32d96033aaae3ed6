"""Live reload: change tracking, code unit reloads and asset scheduling."""

from livecode.reload.reloader import CodeReloader, ReloadResult, ReloadStatus
from livecode.reload.scheduler import PendingFire, ReloadScheduler
from livecode.reload.watcher import ChangeTracker, TrackedAsset, WatchedUnit

__all__ = [
    "ChangeTracker",
    "CodeReloader",
    "PendingFire",
    "ReloadResult",
    "ReloadScheduler",
    "ReloadStatus",
    "TrackedAsset",
    "WatchedUnit",
]
