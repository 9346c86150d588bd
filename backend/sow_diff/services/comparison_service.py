"""
Service for comparing two SOW revisions
"""
from typing import Optional
from loguru import logger

from sow_diff.comparison import ChangeType, DiffResult, RevisionDiffEngine
from sow_diff.core.config import Settings, get_settings
from sow_diff.core.error_handlers import UnrelatedRevisions
from sow_diff.services.snapshot_store import SnapshotStore


class ComparisonService:
    """
    Loads two revisions and runs the diff engine on them
    """

    def __init__(self, store: SnapshotStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()
        self.engine = RevisionDiffEngine(
            lookahead=self.settings.diff_lookahead_window,
            html_atomic_threshold=self.settings.html_atomic_threshold,
            excluded_fields=self.settings.excluded_fields,
            status_field=self.settings.status_field,
        )

    async def compare(self,
                      sow_id: str,
                      compare_with_id: str,
                      include_status: Optional[bool] = None) -> DiffResult:
        """
        Compare two revisions of the same SOW
        
        Args:
            sow_id: Revision treated as the previous version
            compare_with_id: Revision treated as the new version
            include_status: Keep status changes in the result; defaults to settings
            
        Returns:
            DiffResult for the pair, in the order given
        """
        previous = await self.store.get_snapshot(sow_id)
        new = await self.store.get_snapshot(compare_with_id)

        if previous.root_id != new.root_id:
            raise UnrelatedRevisions(previous.root_id, new.root_id)

        result = self.engine.compute_diff(previous, new)

        if include_status is None:
            include_status = self.settings.include_status_changes
        if not include_status:
            result = DiffResult(
                snapshot1_ref=result.snapshot1_ref,
                snapshot2_ref=result.snapshot2_ref,
                changes=tuple(
                    change for change in result.changes
                    if change.change_type != ChangeType.STATUS_CHANGE
                ),
            )

        logger.info(
            f"Compared SOW revisions {sow_id} (v{previous.version}) and "
            f"{compare_with_id} (v{new.version}): {result.total_changes} changes"
        )
        return result
