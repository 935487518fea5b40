"""
Интерфейсы (абстрактные классы) для домена Grouping.

Домен Grouping отвечает за:
1. Нормализацию payload провайдера OCR во фрагменты
2. Группировку фрагментов в строки
3. Детекцию цен и разбиение строк на позиции меню
4. Сборку итоговых GroupedMenuItem
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from contracts.fragment_dto import OCRPage, TextFragment
from contracts.menu_item_dto import GroupedMenuItem


class IProviderStrategy(ABC):
    """Интерфейс для адаптера payload конкретного провайдера OCR."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Идентификатор провайдера (для фабрики и логирования)."""
        pass

    @abstractmethod
    def matches(self, payload: Dict[str, Any]) -> bool:
        """
        Проверяет, похож ли payload на ответ этого провайдера.

        Args:
            payload: Сырой ответ провайдера (JSON-структура)

        Returns:
            True если стратегия умеет разбирать этот payload
        """
        pass

    @abstractmethod
    def normalize(self, payload: Dict[str, Any]) -> OCRPage:
        """
        Преобразует payload провайдера в OCRPage.

        Args:
            payload: Сырой ответ провайдера (JSON-структура)

        Returns:
            OCRPage с провайдер-независимыми фрагментами

        Raises:
            MalformedInputError: если нет обязательных полей
        """
        pass


class IGroupingPipeline(ABC):
    """Интерфейс для пайплайна группировки (домен Grouping)."""

    @abstractmethod
    def process(self, payload: Dict[str, Any], provider: Optional[str] = None) -> Any:
        """
        Обрабатывает payload провайдера через полный пайплайн.

        Args:
            payload: Сырой ответ провайдера OCR
            provider: Идентификатор провайдера (None = автоопределение)

        Returns:
            Результат пайплайна с позициями меню
        """
        pass

    @abstractmethod
    def group_fragments(self, fragments: List[TextFragment]) -> List[GroupedMenuItem]:
        """
        Группирует уже нормализованные фрагменты в позиции меню.

        Args:
            fragments: Провайдер-независимые фрагменты

        Returns:
            Упорядоченный список позиций меню
        """
        pass
