"""
Data model for SOW revision comparison.
Snapshots are the input, DiffResult is what the engine hands back.
"""

from typing import List, Dict, Tuple, Optional, Any
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime


class ChangeType(Enum):
    """Classification of a single field-level change."""
    FIELD_UPDATE = "field_update"
    CONTENT_EDIT = "content_edit"
    STATUS_CHANGE = "status_change"


class SegmentKind(Enum):
    """Kinds of diff segments produced by the text differs."""
    COMMON = "common"
    ADDED = "added"
    REMOVED = "removed"


class FieldKind(Enum):
    """How a field value is compared and rendered."""
    PLAIN_TEXT = "plain_text"
    HTML = "html"
    STRUCTURED_LIST = "structured_list"


@dataclass(frozen=True)
class Snapshot:
    """Immutable captured state of one SOW revision."""
    id: str
    version: int
    status: str
    created_at: datetime
    fields: Dict[str, str] = field(default_factory=dict)
    parent_id: Optional[str] = None

    @property
    def root_id(self) -> str:
        """Id of the revision chain this snapshot belongs to."""
        return self.parent_id or self.id


@dataclass(frozen=True)
class SnapshotRef:
    """Snapshot metadata carried alongside a diff result."""
    id: str
    version: int
    status: str
    created_at: datetime

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotRef":
        return cls(
            id=snapshot.id,
            version=snapshot.version,
            status=snapshot.status,
            created_at=snapshot.created_at,
        )


@dataclass(frozen=True)
class DiffSegment:
    """Atomic common/added/removed unit of a diff."""
    kind: SegmentKind
    value: str

    @classmethod
    def common(cls, value: str) -> "DiffSegment":
        return cls(SegmentKind.COMMON, value)

    @classmethod
    def added(cls, value: str) -> "DiffSegment":
        return cls(SegmentKind.ADDED, value)

    @classmethod
    def removed(cls, value: str) -> "DiffSegment":
        return cls(SegmentKind.REMOVED, value)


# (previous side, new side)
SegmentPair = Tuple[List[DiffSegment], List[DiffSegment]]


@dataclass(frozen=True)
class ChangeDiff:
    """One field-level difference between two snapshots."""
    field_name: str
    previous_value: str
    new_value: str
    change_type: ChangeType
    diff_summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_name": self.field_name,
            "previous_value": self.previous_value,
            "new_value": self.new_value,
            "change_type": self.change_type.value,
            "diff_summary": self.diff_summary,
        }


@dataclass(frozen=True)
class DiffResult:
    """All field changes between two snapshots plus their metadata."""
    snapshot1_ref: SnapshotRef
    snapshot2_ref: SnapshotRef
    changes: Tuple[ChangeDiff, ...] = ()

    @property
    def total_changes(self) -> int:
        return len(self.changes)

    def field_names(self) -> List[str]:
        return [change.field_name for change in self.changes]

    def get_change(self, field_name: str) -> Optional[ChangeDiff]:
        for change in self.changes:
            if change.field_name == field_name:
                return change
        return None


@dataclass(frozen=True)
class FieldDiff:
    """
    Per-field comparison output before rendering.

    For plain text and HTML fields the segment lists hold the diff. For
    structured lists the segments are empty and `previous_display` /
    `new_display` hold the reformatted values.
    """
    kind: FieldKind
    previous_segments: Tuple[DiffSegment, ...] = ()
    new_segments: Tuple[DiffSegment, ...] = ()
    previous_display: str = ""
    new_display: str = ""
    identical: bool = False
