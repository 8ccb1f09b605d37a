"""
Visualization tools for Circuit Challenge puzzles.
"""

from .static_viz import PuzzleVisualizer

__all__ = [
    'PuzzleVisualizer',
]
