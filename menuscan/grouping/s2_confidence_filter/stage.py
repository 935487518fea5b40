"""
Stage 2: Confidence Filter (опциональный)

ЦКП: Только фрагменты с confidence >= min_confidence.

Input: OCRPage (из Stage 1)
Output: ConfidenceFilterResult (OCRPage с пересчитанной средней confidence)

Фильтр чистый: поля оставшихся фрагментов не меняются, порядок сохраняется.
"""

from dataclasses import dataclass, field
from typing import List

from loguru import logger

from config.settings import MIN_CONFIDENCE
from contracts.fragment_dto import OCRPage, TextFragment
from ..domain.exceptions import GroupingConfigurationError


def filter_fragments(fragments: List[TextFragment], min_confidence: float) -> List[TextFragment]:
    """Оставляет фрагменты с confidence >= min_confidence (в исходном порядке)."""
    return [f for f in fragments if f.confidence >= min_confidence]


@dataclass
class ConfidenceFilterResult:
    """
    Результат Stage 2: Confidence Filter.

    ЦКП: Страница без фрагментов с низкой уверенностью.
    """
    page: OCRPage = field(default_factory=OCRPage)
    min_confidence: float = MIN_CONFIDENCE
    original_count: int = 0
    removed_count: int = 0

    def to_dict(self) -> dict:
        return {
            "min_confidence": self.min_confidence,
            "fragments_count": len(self.page.fragments),
            "original_count": self.original_count,
            "removed_count": self.removed_count,
            "confidence": self.page.confidence,
        }


class ConfidenceFilterStage:
    """
    Stage 2: Confidence Filter.

    ЦКП: Отсев фрагментов ниже порога уверенности.
    """

    def __init__(self, min_confidence: float = MIN_CONFIDENCE):
        """
        Args:
            min_confidence: Минимальная уверенность фрагмента [0, 1]
        """
        if not 0.0 <= min_confidence <= 1.0:
            raise GroupingConfigurationError(
                message=f"min_confidence должен быть в [0, 1], получено: {min_confidence}",
                component="ConfidenceFilterStage",
            )
        self.min_confidence = min_confidence

    def process(self, page: OCRPage) -> ConfidenceFilterResult:
        """
        Фильтрует фрагменты страницы.

        Args:
            page: Результат Stage 1

        Returns:
            ConfidenceFilterResult: страница с пересчитанной confidence
        """
        kept = filter_fragments(page.fragments, self.min_confidence)
        removed = len(page.fragments) - len(kept)

        logger.debug(
            f"[Stage 2: Confidence Filter] min_confidence={self.min_confidence}: "
            f"оставлено {len(kept)} из {len(page.fragments)}"
        )
        if page.fragments and not kept:
            logger.warning("[Stage 2: Confidence Filter] Все фрагменты отброшены")

        filtered = OCRPage.from_fragments(kept, full_text=page.full_text, provider=page.provider)

        return ConfidenceFilterResult(
            page=filtered,
            min_confidence=self.min_confidence,
            original_count=len(page.fragments),
            removed_count=removed,
        )
