"""
Providers sub-package для Stage 1 Normalization.

Реализует Strategy Pattern: одна стратегия на формат ответа провайдера OCR.
"""

from .base import AbstractProviderStrategy
from .google_vision import GoogleVisionStrategy
from .google_vision_document import GoogleVisionDocumentStrategy
from .fragments import FragmentsStrategy
from .factory import ProviderStrategyFactory

__all__ = [
    "AbstractProviderStrategy",
    "GoogleVisionStrategy",
    "GoogleVisionDocumentStrategy",
    "FragmentsStrategy",
    "ProviderStrategyFactory",
]
