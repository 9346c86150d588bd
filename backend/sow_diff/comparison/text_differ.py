"""
Word-level diff for plain text fields.

Uses a greedy alignment with a bounded lookahead window instead of an exact
LCS, so the cost stays O(n * L) on arbitrarily long document text. The output
is not guaranteed to be a minimal edit script.
"""

import re
from typing import List, Tuple

from .models import DiffSegment, SegmentKind, SegmentPair

DEFAULT_LOOKAHEAD = 50

_WHITESPACE_SPLIT = re.compile(r'(\s+)')


def tokenize(text: str) -> List[str]:
    """Split text into words and whitespace runs; joining the tokens gives back `text`."""
    return [token for token in _WHITESPACE_SPLIT.split(text) if token]


def coalesce(segments: List[DiffSegment]) -> List[DiffSegment]:
    """Merge adjacent segments of the same kind."""
    merged: List[DiffSegment] = []
    for segment in segments:
        if not segment.value:
            continue
        if merged and merged[-1].kind == segment.kind:
            merged[-1] = DiffSegment(segment.kind, merged[-1].value + segment.value)
        else:
            merged.append(segment)
    return merged


def split_sides(operations: List[Tuple[SegmentKind, str]]) -> SegmentPair:
    """Project a single edit sequence onto the previous and new sides."""
    prev_side = [DiffSegment(kind, value) for kind, value in operations
                 if kind != SegmentKind.ADDED]
    next_side = [DiffSegment(kind, value) for kind, value in operations
                 if kind != SegmentKind.REMOVED]
    return coalesce(prev_side), coalesce(next_side)


class PlainTextDiffer:
    """
    Token diff with bounded-lookahead resynchronization.

    On a mismatch the differ searches up to `lookahead` tokens ahead on both
    sides for the nearest point where the streams line up again. The smaller
    offset wins; on a tie the insertion reading is preferred. When nothing
    matches inside the window the two current tokens are treated as a
    one-token substitution.
    """

    def __init__(self, lookahead: int = DEFAULT_LOOKAHEAD):
        if lookahead < 1:
            raise ValueError("lookahead must be a positive integer")
        self.lookahead = lookahead

    def diff(self, prev: str, next_: str) -> SegmentPair:
        """
        Diff two plain text values.

        Args:
            prev: Previous value
            next_: New value

        Returns:
            (previous-side segments, new-side segments)
        """
        if not prev and not next_:
            return [], []
        if not prev:
            return [], [DiffSegment.added(next_)]
        if not next_:
            return [DiffSegment.removed(prev)], []

        operations = self._align(tokenize(prev), tokenize(next_))
        return split_sides(operations)

    def _align(self, prev_tokens: List[str],
               next_tokens: List[str]) -> List[Tuple[SegmentKind, str]]:
        operations: List[Tuple[SegmentKind, str]] = []
        i = j = 0
        n_prev, n_next = len(prev_tokens), len(next_tokens)

        while i < n_prev or j < n_next:
            if i >= n_prev:
                operations.extend((SegmentKind.ADDED, tok) for tok in next_tokens[j:])
                break
            if j >= n_next:
                operations.extend((SegmentKind.REMOVED, tok) for tok in prev_tokens[i:])
                break

            if prev_tokens[i] == next_tokens[j]:
                operations.append((SegmentKind.COMMON, prev_tokens[i]))
                i += 1
                j += 1
                continue

            inserted, removed = self._resync(prev_tokens, next_tokens, i, j)
            if inserted:
                operations.extend((SegmentKind.ADDED, tok) for tok in next_tokens[j:j + inserted])
                j += inserted
            elif removed:
                operations.extend((SegmentKind.REMOVED, tok) for tok in prev_tokens[i:i + removed])
                i += removed
            else:
                operations.append((SegmentKind.REMOVED, prev_tokens[i]))
                operations.append((SegmentKind.ADDED, next_tokens[j]))
                i += 1
                j += 1

        return operations

    def _resync(self, prev_tokens: List[str], next_tokens: List[str],
                i: int, j: int) -> Tuple[int, int]:
        """
        Find the nearest resynchronization offset.

        Returns (inserted, removed): the number of new tokens to emit as added,
        or previous tokens to emit as removed. (0, 0) means no match in the window.
        """
        for offset in range(1, self.lookahead + 1):
            if j + offset < len(next_tokens) and prev_tokens[i] == next_tokens[j + offset]:
                return offset, 0
            if i + offset < len(prev_tokens) and prev_tokens[i + offset] == next_tokens[j]:
                return 0, offset
            if j + offset >= len(next_tokens) and i + offset >= len(prev_tokens):
                break
        return 0, 0
