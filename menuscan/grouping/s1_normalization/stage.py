"""
Stage 1: Fragment Normalization

ЦКП: Преобразование ответа провайдера OCR в OCRPage.fragments[].

Input: payload провайдера (JSON-структура)
Output: NormalizationResult (OCRPage + статистика)

Алгоритм:
1. Выбор стратегии по идентификатору провайдера (или автоопределение)
2. Нормализация payload стратегией (синтетическая full-page запись отбрасывается)
3. Удаление фрагментов с пустым текстом
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from loguru import logger

from contracts.fragment_dto import OCRPage
from .providers import ProviderStrategyFactory


@dataclass
class NormalizationResult:
    """
    Результат Stage 1: Normalization.

    ЦКП: Провайдер-независимая страница OCR.
    """
    page: OCRPage = field(default_factory=OCRPage)
    provider: str = ""
    original_count: int = 0
    dropped_count: int = 0

    def to_dict(self) -> dict:
        return {
            "provider": self.provider,
            "fragments_count": len(self.page.fragments),
            "original_count": self.original_count,
            "dropped_count": self.dropped_count,
            "confidence": self.page.confidence,
        }


class NormalizationStage:
    """
    Stage 1: Fragment Normalization.

    Единственное место, знающее о формате конкретного провайдера OCR.
    Ошибки формата (MalformedInputError) пробрасываются без ретраев.
    """

    def __init__(self, strategy_factory: Optional[ProviderStrategyFactory] = None):
        """
        Args:
            strategy_factory: Фабрика стратегий (по умолчанию стандартная)
        """
        self.strategy_factory = strategy_factory or ProviderStrategyFactory()

    def process(self, payload: Dict[str, Any], provider: Optional[str] = None) -> NormalizationResult:
        """
        Нормализует payload провайдера.

        Args:
            payload: Ответ провайдера OCR
            provider: Идентификатор провайдера (None = автоопределение)

        Returns:
            NormalizationResult: OCRPage с фрагментами

        Raises:
            MalformedInputError: payload не содержит обязательных полей
            ProviderResponseError: провайдер вернул ошибку
            GroupingConfigurationError: неизвестный провайдер
        """
        strategy = self.strategy_factory.get(provider, payload)
        raw_page = strategy.normalize(payload)

        fragments = [f for f in raw_page.fragments if f.text]
        dropped = len(raw_page.fragments) - len(fragments)
        if dropped:
            logger.warning(f"[Stage 1: Normalization] Отброшено {dropped} фрагментов с пустым текстом")

        page = raw_page
        if dropped:
            page = OCRPage.from_fragments(
                fragments,
                full_text=raw_page.full_text,
                provider=raw_page.provider,
            )

        if not page.has_content():
            logger.warning(f"[Stage 1: Normalization] Провайдер {strategy.name}: нет фрагментов")
        else:
            logger.info(
                f"[Stage 1: Normalization] Провайдер {strategy.name}: "
                f"{len(page.fragments)} фрагментов, confidence={page.confidence:.3f}"
            )

        return NormalizationResult(
            page=page,
            provider=strategy.name,
            original_count=len(raw_page.fragments),
            dropped_count=dropped,
        )
