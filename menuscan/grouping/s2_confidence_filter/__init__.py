"""
Stage 2: Confidence Filter

ЦКП: Отсев фрагментов с низкой уверенностью OCR.
"""

from .stage import ConfidenceFilterStage, ConfidenceFilterResult, filter_fragments

__all__ = [
    "ConfidenceFilterStage",
    "ConfidenceFilterResult",
    "filter_fragments",
]
