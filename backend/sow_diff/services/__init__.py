from .snapshot_store import SnapshotStore, InMemorySnapshotStore
from .comparison_service import ComparisonService

__all__ = ["SnapshotStore", "InMemorySnapshotStore", "ComparisonService"]
