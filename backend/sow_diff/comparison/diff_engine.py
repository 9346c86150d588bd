"""
Revision comparison engine.

compute_diff() is the entry point: it takes two snapshots in caller order
(previous first) and returns a DiffResult. diff_field() and render_change()
produce the per-field highlighted view consumed by the UI.
"""

import logging
from typing import Iterable, Optional

from .models import (
    ChangeDiff, DiffResult, FieldDiff, FieldKind, Snapshot, SnapshotRef
)
from .field_comparator import FieldComparator
from .text_differ import PlainTextDiffer, DEFAULT_LOOKAHEAD
from .html_differ import HtmlAwareDiffer, HtmlProbe, DEFAULT_ATOMIC_THRESHOLD, detect_html
from .structured_list import StructuredListFormatter
from .visualizers.side_by_side import RenderedChange, SideBySideVisualizer, escape_text

logger = logging.getLogger(__name__)


class RevisionDiffEngine:
    """
    Stateless comparison engine for SOW revisions.

    The engine is total: any pair of string values yields a result. When the
    structured or HTML path fails on a value the field is diffed as plain
    text instead.
    """

    def __init__(self,
                 lookahead: int = DEFAULT_LOOKAHEAD,
                 html_atomic_threshold: int = DEFAULT_ATOMIC_THRESHOLD,
                 excluded_fields: Optional[Iterable[str]] = None,
                 status_field: str = 'status'):
        self.list_formatter = StructuredListFormatter()
        self.text_differ = PlainTextDiffer(lookahead=lookahead)
        self.html_differ = HtmlAwareDiffer(atomic_threshold=html_atomic_threshold)
        self.comparator = FieldComparator(
            excluded_fields=excluded_fields,
            status_field=status_field,
            list_formatter=self.list_formatter,
        )
        self.visualizer = SideBySideVisualizer()

    def compute_diff(self, snapshot_prev: Snapshot, snapshot_new: Snapshot) -> DiffResult:
        """
        Compare two snapshots.

        Args:
            snapshot_prev: Snapshot treated as the previous version
            snapshot_new: Snapshot treated as the new version

        Returns:
            DiffResult with one ChangeDiff per differing field
        """
        changes = self.comparator.compare(snapshot_prev, snapshot_new)
        logger.debug(
            "Compared snapshot %s (v%s) with %s (v%s): %d changes",
            snapshot_prev.id, snapshot_prev.version,
            snapshot_new.id, snapshot_new.version, len(changes)
        )
        return DiffResult(
            snapshot1_ref=SnapshotRef.from_snapshot(snapshot_prev),
            snapshot2_ref=SnapshotRef.from_snapshot(snapshot_new),
            changes=tuple(changes),
        )

    def diff_field(self, previous_value: str, new_value: str) -> FieldDiff:
        """Pick the comparison strategy for a field and run it."""
        previous_value = previous_value or ''
        new_value = new_value or ''

        try:
            if self.list_formatter.applies_to(previous_value, new_value):
                return self._structured_diff(previous_value, new_value)

            prev_probe = detect_html(previous_value)
            new_probe = detect_html(new_value)
            if prev_probe.is_html or new_probe.is_html:
                # HTML panes are inserted verbatim, so the plain side is escaped first
                return self._html_diff(self._as_markup(prev_probe), self._as_markup(new_probe))
        except Exception as e:
            logger.warning(f"Falling back to plain text diff: {e}")

        return self._plain_diff(previous_value, new_value)

    def render_change(self, change: ChangeDiff, raw_previous: bool = False,
                      raw_new: bool = False, highlight: bool = True) -> RenderedChange:
        field_diff = self.diff_field(change.previous_value, change.new_value)
        return self.visualizer.render(
            change.previous_value, change.new_value, field_diff,
            raw_previous=raw_previous, raw_new=raw_new, highlight=highlight,
        )

    def _structured_diff(self, previous_value: str, new_value: str) -> FieldDiff:
        return FieldDiff(
            kind=FieldKind.STRUCTURED_LIST,
            previous_display=self.list_formatter.format(previous_value) or '',
            new_display=self.list_formatter.format(new_value) or '',
        )

    @staticmethod
    def _as_markup(probe: HtmlProbe) -> str:
        return probe.content if probe.is_html else escape_text(probe.content)

    def _html_diff(self, previous_html: str, new_html: str) -> FieldDiff:
        prev_segments, new_segments = self.html_differ.diff(previous_html, new_html)
        return FieldDiff(
            kind=FieldKind.HTML,
            previous_segments=tuple(prev_segments),
            new_segments=tuple(new_segments),
            previous_display=previous_html,
            new_display=new_html,
            identical=self.html_differ.is_visually_equal(previous_html, new_html),
        )

    def _plain_diff(self, previous_value: str, new_value: str) -> FieldDiff:
        prev_segments, new_segments = self.text_differ.diff(previous_value, new_value)
        return FieldDiff(
            kind=FieldKind.PLAIN_TEXT,
            previous_segments=tuple(prev_segments),
            new_segments=tuple(new_segments),
            previous_display=previous_value,
            new_display=new_value,
            identical=previous_value == new_value,
        )


_default_engine = RevisionDiffEngine()


def compute_diff(snapshot_prev: Snapshot, snapshot_new: Snapshot) -> DiffResult:
    """Compare two snapshots with the default engine settings."""
    return _default_engine.compute_diff(snapshot_prev, snapshot_new)


def diff_field(previous_value: str, new_value: str) -> FieldDiff:
    """Diff one pair of field values with the default engine settings."""
    return _default_engine.diff_field(previous_value, new_value)
