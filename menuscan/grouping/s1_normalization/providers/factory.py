"""
Provider Strategy Factory - выбор стратегии нормализации.

По идентификатору провайдера (или по структуре payload) выбирает
стратегию, которая умеет разбирать ответ.
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from config.settings import DEFAULT_FRAGMENT_CONFIDENCE
from ...domain.exceptions import GroupingConfigurationError, MalformedInputError
from .base import AbstractProviderStrategy
from .fragments import FragmentsStrategy
from .google_vision import GoogleVisionStrategy
from .google_vision_document import GoogleVisionDocumentStrategy


class ProviderStrategyFactory:
    """
    Фабрика стратегий нормализации.

    Пример:
        factory = ProviderStrategyFactory()
        strategy = factory.get("google_vision")
        page = strategy.normalize(payload)
    """

    def __init__(self, default_confidence: float = DEFAULT_FRAGMENT_CONFIDENCE):
        """
        Args:
            default_confidence: Уверенность для фрагментов без confidence
        """
        # Порядок важен для автоопределения: DOCUMENT_TEXT_DETECTION возвращает
        # и fullTextAnnotation, и textAnnotations - берём вариант с confidence.
        strategies: List[AbstractProviderStrategy] = [
            GoogleVisionDocumentStrategy(default_confidence),
            GoogleVisionStrategy(default_confidence),
            FragmentsStrategy(default_confidence),
        ]
        self._strategies: Dict[str, AbstractProviderStrategy] = {
            s.name: s for s in strategies
        }

    @property
    def providers(self) -> List[str]:
        return list(self._strategies)

    def get(self, provider: Optional[str] = None, payload: Optional[Dict[str, Any]] = None) -> AbstractProviderStrategy:
        """
        Получить стратегию для провайдера.

        Args:
            provider: Идентификатор провайдера (нормализуется к нижнему регистру).
                      Если None -> автоопределение по payload.
            payload: Payload для автоопределения

        Returns:
            AbstractProviderStrategy для этого провайдера

        Raises:
            GroupingConfigurationError: неизвестный провайдер
            MalformedInputError: формат payload не распознан
        """
        if not provider:
            return self.detect(payload)

        normalized_name = provider.strip().lower()

        if normalized_name not in self._strategies:
            raise GroupingConfigurationError(
                message=f"Неизвестный провайдер OCR '{provider}'. Доступные: {self.providers}",
                component="ProviderStrategyFactory",
            )

        strategy = self._strategies[normalized_name]
        logger.debug(f"[ProviderStrategyFactory] Выбрана стратегия: {strategy.name}")
        return strategy

    def detect(self, payload: Optional[Dict[str, Any]]) -> AbstractProviderStrategy:
        """Автоопределение стратегии по структуре payload."""
        if not isinstance(payload, dict):
            raise MalformedInputError(
                message="Невозможно определить провайдера: payload не является JSON-объектом",
                component="ProviderStrategyFactory",
            )

        for strategy in self._strategies.values():
            if strategy.matches(payload):
                logger.debug(f"[ProviderStrategyFactory] Автоопределён провайдер: {strategy.name}")
                return strategy

        raise MalformedInputError(
            message=f"Формат payload не распознан (ключи: {sorted(payload)[:10]})",
            component="ProviderStrategyFactory",
        )

    def register(self, strategy: AbstractProviderStrategy) -> None:
        """
        Зарегистрировать стратегию для нового провайдера.

        Args:
            strategy: Экземпляр AbstractProviderStrategy
        """
        self._strategies[strategy.name.lower()] = strategy
        logger.info(f"[ProviderStrategyFactory] Зарегистрирована новая стратегия: {strategy.name}")
