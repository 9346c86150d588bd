"""
Character-level diff for rich text (HTML) fields.

The differ never parses the markup. It trims the longest common prefix and
suffix and highlights only the region in between, which keeps the highlight
wrappers out of unchanged tags and bounds the work to O(n) plus a small
middle region.
"""

import re
import json
import logging
from typing import List
from dataclasses import dataclass

from .models import DiffSegment, SegmentPair
from .text_differ import coalesce

logger = logging.getLogger(__name__)

DEFAULT_ATOMIC_THRESHOLD = 100

# Keys of a JSON envelope that may carry the rendered HTML
HTML_ENVELOPE_KEYS = ('content', 'html', 'text', 'body', 'value')

_WHITESPACE_RUN = re.compile(r'\s+')


@dataclass(frozen=True)
class HtmlProbe:
    """Result of inspecting a field value for HTML content."""
    is_html: bool
    content: str
    raw_value: str


def looks_like_html(text: str) -> bool:
    return '<' in text and '>' in text


def detect_html(value: str) -> HtmlProbe:
    """
    Decide whether a serialized field value holds HTML.

    A value is HTML when it contains both '<' and '>', or when it is a JSON
    object whose content-like key holds such a string. For the envelope case
    `content` is the extracted HTML. A JSON object or array without HTML is
    reported as non-HTML with a pretty-printed `content`.
    """
    if not value or not value.strip():
        return HtmlProbe(False, '', value)

    stripped = value.strip()
    if stripped.startswith('{') or stripped.startswith('['):
        try:
            parsed = json.loads(stripped)
        except (ValueError, RecursionError):
            parsed = None
        else:
            if isinstance(parsed, dict):
                for key in HTML_ENVELOPE_KEYS:
                    candidate = parsed.get(key)
                    if isinstance(candidate, str) and looks_like_html(candidate):
                        return HtmlProbe(True, candidate, value)
            if isinstance(parsed, (dict, list)):
                return HtmlProbe(False, json.dumps(parsed, indent=2, ensure_ascii=False), value)

    if looks_like_html(value):
        return HtmlProbe(True, value, value)
    return HtmlProbe(False, value, value)


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE_RUN.sub(' ', text).strip()


def common_prefix_length(a: str, b: str) -> int:
    limit = min(len(a), len(b))
    idx = 0
    while idx < limit and a[idx] == b[idx]:
        idx += 1
    return idx


def common_suffix_length(a: str, b: str, limit: int) -> int:
    """Length of the common suffix, never longer than `limit`."""
    idx = 0
    while idx < limit and a[len(a) - 1 - idx] == b[len(b) - 1 - idx]:
        idx += 1
    return idx


class HtmlAwareDiffer:
    """
    Prefix/suffix-trimmed diff for HTML values.

    Middles shorter than `atomic_threshold` on both sides are compared
    position by position. This is an index-aligned comparison, not an
    alignment: an insertion early in the middle shows every later character
    as changed. Larger middles are emitted as one removed and one added block.
    """

    def __init__(self, atomic_threshold: int = DEFAULT_ATOMIC_THRESHOLD):
        if atomic_threshold < 0:
            raise ValueError("atomic_threshold must not be negative")
        self.atomic_threshold = atomic_threshold

    def is_visually_equal(self, prev: str, next_: str) -> bool:
        return normalize_whitespace(prev) == normalize_whitespace(next_)

    def diff(self, prev: str, next_: str) -> SegmentPair:
        """
        Diff two HTML strings.

        Args:
            prev: Previous markup
            next_: New markup

        Returns:
            (previous-side segments, new-side segments)
        """
        if not prev and not next_:
            return [], []
        if not prev:
            return [], [DiffSegment.added(next_)]
        if not next_:
            return [DiffSegment.removed(prev)], []

        if self.is_visually_equal(prev, next_):
            return [DiffSegment.common(prev)], [DiffSegment.common(next_)]

        prefix_len = common_prefix_length(prev, next_)
        max_suffix = min(len(prev) - prefix_len, len(next_) - prefix_len)
        suffix_len = common_suffix_length(prev, next_, max_suffix)

        prefix = prev[:prefix_len]
        suffix = prev[len(prev) - suffix_len:]
        prev_middle = prev[prefix_len:len(prev) - suffix_len]
        next_middle = next_[prefix_len:len(next_) - suffix_len]

        prev_mid_segments, next_mid_segments = self._diff_middle(prev_middle, next_middle)

        prev_segments = [DiffSegment.common(prefix)] + prev_mid_segments + [DiffSegment.common(suffix)]
        next_segments = [DiffSegment.common(prefix)] + next_mid_segments + [DiffSegment.common(suffix)]
        return coalesce(prev_segments), coalesce(next_segments)

    def _diff_middle(self, prev_middle: str, next_middle: str) -> SegmentPair:
        if len(prev_middle) >= self.atomic_threshold or len(next_middle) >= self.atomic_threshold:
            logger.debug(
                "HTML middle region too large for character diff (%d/%d chars)",
                len(prev_middle), len(next_middle)
            )
            return [DiffSegment.removed(prev_middle)], [DiffSegment.added(next_middle)]
        return self._positional_diff(prev_middle, next_middle)

    @staticmethod
    def _positional_diff(prev_middle: str, next_middle: str) -> SegmentPair:
        prev_segments: List[DiffSegment] = []
        next_segments: List[DiffSegment] = []

        for k in range(max(len(prev_middle), len(next_middle))):
            if k >= len(prev_middle):
                next_segments.append(DiffSegment.added(next_middle[k]))
            elif k >= len(next_middle):
                prev_segments.append(DiffSegment.removed(prev_middle[k]))
            elif prev_middle[k] == next_middle[k]:
                prev_segments.append(DiffSegment.common(prev_middle[k]))
                next_segments.append(DiffSegment.common(next_middle[k]))
            else:
                prev_segments.append(DiffSegment.removed(prev_middle[k]))
                next_segments.append(DiffSegment.added(next_middle[k]))

        return prev_segments, next_segments

