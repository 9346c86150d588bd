"""
Side-by-side rendering of field changes.
Turns diff segments into highlighted markup for the previous and new panes.
"""

import html
from typing import Iterable, Optional
from dataclasses import dataclass
from enum import Enum

from ..models import DiffSegment, FieldDiff, FieldKind, SegmentKind


class HighlightStyle(Enum):
    """CSS classes for highlighted spans."""
    ADDITION = "bg-green-200 text-green-900 px-1 rounded"
    DELETION = "bg-red-200 text-red-900 px-1 rounded line-through"


EMPTY_PLACEHOLDER = '<span class="text-gray-400 italic">(empty)</span>'


def escape_text(text: str) -> str:
    """HTML-escape & < > " and ' in untrusted text."""
    return html.escape(text, quote=True)


@dataclass(frozen=True)
class RenderedChange:
    """Markup for both panes of one field change."""
    mode: FieldKind
    previous_html: str
    new_html: str


class HighlightRenderer:
    """
    Wraps diff segments in highlight markup.

    Plain text segment values are escaped before wrapping. HTML segment values
    come from the authoring editor and are inserted verbatim; only the wrapper
    is new markup. Escaping HTML values would corrupt the rendered document.
    """

    def __init__(self,
                 addition_class: str = HighlightStyle.ADDITION.value,
                 deletion_class: str = HighlightStyle.DELETION.value):
        self.addition_class = addition_class
        self.deletion_class = deletion_class

    def render_segment(self, segment: DiffSegment, escape: bool) -> str:
        value = escape_text(segment.value) if escape else segment.value
        if segment.kind == SegmentKind.ADDED:
            return f'<span class="{self.addition_class}">{value}</span>'
        if segment.kind == SegmentKind.REMOVED:
            return f'<span class="{self.deletion_class}">{value}</span>'
        return value

    def render_segments(self, segments: Iterable[DiffSegment], escape: bool) -> str:
        return ''.join(self.render_segment(segment, escape) for segment in segments)

    def render_plain_text(self, segments: Iterable[DiffSegment]) -> str:
        return self.render_segments(segments, escape=True)

    def render_html(self, segments: Iterable[DiffSegment]) -> str:
        return self.render_segments(segments, escape=False)


class SideBySideVisualizer:
    """
    Builds the two panes shown for a change.

    Each side can independently be switched to raw mode, which shows the
    stored value as-is (escaped, in a <pre>) with no highlighting.
    `highlight=False` shows the formatted values without diff markers.
    """

    def __init__(self, renderer: Optional[HighlightRenderer] = None):
        self.renderer = renderer or HighlightRenderer()

    def render(self, previous_value: str, new_value: str, field_diff: FieldDiff,
               raw_previous: bool = False, raw_new: bool = False,
               highlight: bool = True) -> RenderedChange:
        """
        Render both panes of a change.

        Args:
            previous_value: Stored previous value
            new_value: Stored new value
            field_diff: Comparison output for the field
            raw_previous: Show the previous value unformatted
            raw_new: Show the new value unformatted
            highlight: Apply diff highlighting

        Returns:
            RenderedChange with markup for each side
        """
        return RenderedChange(
            mode=field_diff.kind,
            previous_html=self._render_side(
                previous_value, field_diff.previous_segments,
                field_diff.previous_display, field_diff.kind, raw_previous, highlight
            ),
            new_html=self._render_side(
                new_value, field_diff.new_segments,
                field_diff.new_display, field_diff.kind, raw_new, highlight
            ),
        )

    def _render_side(self, value: str, segments, display: str, kind: FieldKind,
                     raw: bool, highlight: bool) -> str:
        if not value:
            return EMPTY_PLACEHOLDER
        if raw:
            return f'<pre class="diff-raw">{escape_text(value)}</pre>'

        if kind == FieldKind.STRUCTURED_LIST:
            return f'<pre class="diff-list">{escape_text(display)}</pre>'

        if kind == FieldKind.HTML:
            if highlight:
                return self.renderer.render_html(segments)
            return display

        if highlight:
            return self.renderer.render_plain_text(segments)
        return escape_text(display)
