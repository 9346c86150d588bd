from typing import Optional
from fastapi import APIRouter, Depends, Query

from sow_diff.core.config import get_settings
from sow_diff.core.error_handlers import APIError
from sow_diff.schemas.comparison import ChangeDiffResponse, ComparisonResponse
from sow_diff.services.comparison_service import ComparisonService
from sow_diff.services.snapshot_store import InMemorySnapshotStore, SnapshotStore

router = APIRouter(prefix="/sows", tags=["comparison"])
snapshot_store = InMemorySnapshotStore()


def get_snapshot_store() -> SnapshotStore:
    """
    Version store used to resolve revision ids
    """
    return snapshot_store


def get_comparison_service(store: SnapshotStore = Depends(get_snapshot_store)) -> ComparisonService:
    return ComparisonService(store, get_settings())


@router.get("/{sow_id}/diff", response_model=ComparisonResponse)
async def compare_revisions(
    sow_id: str,
    compare_with: Optional[str] = Query(None, description="Revision to compare against"),
    render: bool = Query(False, description="Include highlighted panes per change"),
    highlight: bool = Query(True, description="Apply diff highlighting when rendering"),
    raw_previous: bool = Query(False, description="Render the previous pane unformatted"),
    raw_new: bool = Query(False, description="Render the new pane unformatted"),
    include_status: Optional[bool] = Query(None, description="Keep status changes"),
    service: ComparisonService = Depends(get_comparison_service)
):
    """
    Compare two revisions of a SOW, field by field
    """
    if not compare_with:
        raise APIError("compare_with parameter is required", status_code=400, error_code="MISSING_PARAMETER")

    result = await service.compare(sow_id, compare_with, include_status=include_status)

    changes = None
    if render:
        changes = [
            ChangeDiffResponse.from_change(
                change,
                service.engine.render_change(
                    change, raw_previous=raw_previous, raw_new=raw_new, highlight=highlight
                ),
            )
            for change in result.changes
        ]

    return ComparisonResponse.from_result(result, changes)
