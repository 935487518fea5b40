"""
Stage 4: Price Detection

ЦКП: Строки с ценами как границы позиций меню.
"""

from .stage import PriceDetectionStage, PriceDetectionResult
from .price_extractor import PriceExtractor, extract_price

__all__ = [
    "PriceDetectionStage",
    "PriceDetectionResult",
    "PriceExtractor",
    "extract_price",
]
