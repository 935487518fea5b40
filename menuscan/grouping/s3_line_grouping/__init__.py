"""
Stage 3: Line Grouping

ЦКП: Упорядоченные строки из фрагментов.
"""

from .stage import LineGroupingStage, LineGroupingResult, Line

__all__ = [
    "LineGroupingStage",
    "LineGroupingResult",
    "Line",
]
