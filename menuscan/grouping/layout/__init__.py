"""
Вспомогательные layout-эвристики (вне основного пайплайна).
"""

from .proximity_clusterer import ProximityClusterer, center_distance
from .structure_detector import StructureDetector, MenuStructure

__all__ = [
    "ProximityClusterer",
    "center_distance",
    "StructureDetector",
    "MenuStructure",
]
