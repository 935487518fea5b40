"""
Stage 6: Item Assembly

ЦКП: Итоговые GroupedMenuItem.
"""

from .stage import ItemAssemblyStage, AssemblyResult
from .geometry import union_bounding_box, mean_confidence

__all__ = [
    "ItemAssemblyStage",
    "AssemblyResult",
    "union_bounding_box",
    "mean_confidence",
]
