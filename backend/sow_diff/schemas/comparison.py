"""
Pydantic schemas for revision comparison responses
"""

from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field

from sow_diff.comparison import ChangeDiff, DiffResult, RenderedChange, SnapshotRef


class SnapshotInfo(BaseModel):
    """Metadata of one compared revision"""
    id: str
    version: int
    status: str
    created_at: datetime

    @classmethod
    def from_ref(cls, ref: SnapshotRef) -> "SnapshotInfo":
        return cls(id=ref.id, version=ref.version, status=ref.status, created_at=ref.created_at)


class RenderedPanes(BaseModel):
    """Highlighted markup for the previous and new panes"""
    mode: Literal["plain_text", "html", "structured_list"]
    previous_html: str
    new_html: str

    @classmethod
    def from_rendered(cls, rendered: RenderedChange) -> "RenderedPanes":
        return cls(
            mode=rendered.mode.value,
            previous_html=rendered.previous_html,
            new_html=rendered.new_html,
        )


class ChangeDiffResponse(BaseModel):
    """One changed field"""
    field_name: str
    previous_value: str
    new_value: str
    change_type: Literal["field_update", "content_edit", "status_change"]
    diff_summary: str
    rendered: Optional[RenderedPanes] = Field(None, description="Present when render=true")

    @classmethod
    def from_change(cls, change: ChangeDiff,
                    rendered: Optional[RenderedChange] = None) -> "ChangeDiffResponse":
        return cls(
            field_name=change.field_name,
            previous_value=change.previous_value,
            new_value=change.new_value,
            change_type=change.change_type.value,
            diff_summary=change.diff_summary,
            rendered=RenderedPanes.from_rendered(rendered) if rendered else None,
        )


class ComparisonResponse(BaseModel):
    """Schema for revision comparison responses"""
    sow1: SnapshotInfo
    sow2: SnapshotInfo
    changes: List[ChangeDiffResponse] = Field(default_factory=list)
    total_changes: int = 0

    @classmethod
    def from_result(cls, result: DiffResult,
                    changes: Optional[List[ChangeDiffResponse]] = None) -> "ComparisonResponse":
        if changes is None:
            changes = [ChangeDiffResponse.from_change(change) for change in result.changes]
        return cls(
            sow1=SnapshotInfo.from_ref(result.snapshot1_ref),
            sow2=SnapshotInfo.from_ref(result.snapshot2_ref),
            changes=changes,
            total_changes=result.total_changes,
        )
