"""
Stage 1: Fragment Normalization

ЦКП: Провайдер-независимые фрагменты из ответа OCR.
"""

from .stage import NormalizationStage, NormalizationResult
from .providers import ProviderStrategyFactory

__all__ = [
    "NormalizationStage",
    "NormalizationResult",
    "ProviderStrategyFactory",
]
