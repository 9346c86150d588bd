"""
Revision comparison for Statements of Work.

This package compares two saved revisions of a SOW field by field:
- FieldComparator: detects and classifies changed fields
- PlainTextDiffer: bounded-lookahead word diff for plain text
- HtmlAwareDiffer: prefix/suffix-trimmed diff for rich text
- StructuredListFormatter: readable rendering of role/contact lists
- Visualizers: highlighted side-by-side panes

Quick Start:
    from sow_diff.comparison import compute_diff

    result = compute_diff(previous_snapshot, new_snapshot)
    for change in result.changes:
        print(change.field_name, change.diff_summary)
"""

from .models import (
    ChangeDiff,
    ChangeType,
    DiffResult,
    DiffSegment,
    FieldDiff,
    FieldKind,
    SegmentKind,
    Snapshot,
    SnapshotRef,
)
from .field_comparator import (
    FieldComparator,
    display_name,
    snapshot_from_record,
    value_to_string,
)
from .text_differ import PlainTextDiffer, tokenize
from .html_differ import HtmlAwareDiffer, HtmlProbe, detect_html
from .structured_list import StructuredListFormatter
from .diff_engine import RevisionDiffEngine, compute_diff, diff_field
from .visualizers import HighlightRenderer, RenderedChange, SideBySideVisualizer

__all__ = [
    # Data model
    "ChangeDiff",
    "ChangeType",
    "DiffResult",
    "DiffSegment",
    "FieldDiff",
    "FieldKind",
    "SegmentKind",
    "Snapshot",
    "SnapshotRef",

    # Components
    "FieldComparator",
    "PlainTextDiffer",
    "HtmlAwareDiffer",
    "HtmlProbe",
    "StructuredListFormatter",
    "RevisionDiffEngine",

    # Rendering
    "HighlightRenderer",
    "RenderedChange",
    "SideBySideVisualizer",

    # Functions
    "compute_diff",
    "diff_field",
    "detect_html",
    "display_name",
    "snapshot_from_record",
    "tokenize",
    "value_to_string",
]
