"""
Контракты DTO проекта Menuscan.

Контракты:
- S1 -> S2..S6: OCRPage, TextFragment, BoundingBox (fragment_dto.py)
- Grouping -> потребители: GroupedMenuItem, ScanSummary (menu_item_dto.py)
"""

# S1 -> Grouping
from .fragment_dto import OCRPage, TextFragment, BoundingBox

# Grouping -> потребители
from .menu_item_dto import GroupedMenuItem, ItemBoundingBox, ScanSummary

__all__ = [
    # S1 -> Grouping
    "OCRPage",
    "TextFragment",
    "BoundingBox",
    # Grouping -> потребители
    "GroupedMenuItem",
    "ItemBoundingBox",
    "ScanSummary",
]
