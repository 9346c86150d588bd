"""
Visualization components for revision comparison results.
"""

from .side_by_side import (
    HighlightRenderer,
    HighlightStyle,
    RenderedChange,
    SideBySideVisualizer,
    escape_text,
)

__all__ = [
    'HighlightRenderer',
    'HighlightStyle',
    'RenderedChange',
    'SideBySideVisualizer',
    'escape_text',
]
