from .comparison import (
    SnapshotInfo,
    RenderedPanes,
    ChangeDiffResponse,
    ComparisonResponse,
)

__all__ = [
    "SnapshotInfo",
    "RenderedPanes",
    "ChangeDiffResponse",
    "ComparisonResponse",
]
