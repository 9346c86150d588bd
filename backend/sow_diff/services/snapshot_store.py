"""
Version store lookup for SOW revisions
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Optional, Union
from loguru import logger

from sow_diff.comparison import Snapshot, snapshot_from_record
from sow_diff.core.error_handlers import APIError, SnapshotNotFound, RetrievalError


class SnapshotStore(ABC):
    """
    Resolves revision identifiers to immutable snapshots.

    Subclasses implement `_load`; `get_snapshot` turns a missing revision into
    SnapshotNotFound and any other backend failure into RetrievalError.
    """

    async def get_snapshot(self, snapshot_id: str) -> Snapshot:
        try:
            snapshot = await self._load(snapshot_id)
        except APIError:
            raise
        except Exception as e:
            logger.error(f"Error loading SOW revision {snapshot_id}: {e}")
            raise RetrievalError(snapshot_id) from e

        if snapshot is None:
            raise SnapshotNotFound(snapshot_id)
        return snapshot

    @abstractmethod
    async def _load(self, snapshot_id: str) -> Optional[Snapshot]:
        """Return the snapshot, or None if the id does not exist"""


class InMemorySnapshotStore(SnapshotStore):
    """
    Snapshot store backed by a dict, seeded with raw SOW rows or snapshots
    """

    def __init__(self, records: Optional[Iterable[Union[Snapshot, Mapping[str, Any]]]] = None):
        self._snapshots: Dict[str, Snapshot] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: Union[Snapshot, Mapping[str, Any]]) -> Snapshot:
        snapshot = record if isinstance(record, Snapshot) else snapshot_from_record(record)
        self._snapshots[snapshot.id] = snapshot
        return snapshot

    def __len__(self) -> int:
        return len(self._snapshots)

    async def _load(self, snapshot_id: str) -> Optional[Snapshot]:
        return self._snapshots.get(snapshot_id)
