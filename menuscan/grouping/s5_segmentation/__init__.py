"""
Stage 5: Item Segmentation

ЦКП: Группы строк, разделённые строками с ценами.
"""

from .stage import ItemSegmentationStage, SegmentationResult, MenuItemGroup

__all__ = [
    "ItemSegmentationStage",
    "SegmentationResult",
    "MenuItemGroup",
]
