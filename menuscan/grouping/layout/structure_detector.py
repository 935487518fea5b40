"""
Structure Detector - грубая оценка структуры меню.

Вспомогательная эвристика: результат - советующие метаданные
для layout-aware рендера, в Stage 3-6 не используется.
"""

from dataclasses import dataclass, field
from typing import List

from loguru import logger

from config.settings import COLUMN_SPAN_THRESHOLD
from contracts.fragment_dto import TextFragment
from ..domain.exceptions import GroupingConfigurationError


@dataclass
class MenuStructure:
    """Структура меню: колонки и секции."""
    has_columns: bool = False
    column_count: int = 1
    sections: List[str] = field(default_factory=list)
    horizontal_span: float = 0.0

    def to_dict(self) -> dict:
        return {
            "has_columns": self.has_columns,
            "column_count": self.column_count,
            "sections": list(self.sections),
            "horizontal_span": self.horizontal_span,
        }


class StructureDetector:
    """
    Детектор колонок по горизонтальному размаху фрагментов.

    span = max(x) - min(x) по левым границам боксов.
    span > column_span_threshold -> две колонки, иначе одна.
    Детекция секций не реализована: sections всегда пустой.
    """

    def __init__(self, column_span_threshold: float = COLUMN_SPAN_THRESHOLD):
        """
        Args:
            column_span_threshold: Размах (px), после которого меню двухколоночное
        """
        if column_span_threshold < 0:
            raise GroupingConfigurationError(
                message=f"column_span_threshold не может быть отрицательным: {column_span_threshold}",
                component="StructureDetector",
            )
        self.column_span_threshold = column_span_threshold

    def detect(self, fragments: List[TextFragment]) -> MenuStructure:
        """
        Оценивает структуру меню.

        Args:
            fragments: Фрагменты страницы

        Returns:
            MenuStructure: для пустого входа - одна колонка
        """
        if not fragments:
            return MenuStructure()

        xs = [f.bounding_box.x for f in fragments]
        span = max(xs) - min(xs)
        has_columns = span > self.column_span_threshold

        structure = MenuStructure(
            has_columns=has_columns,
            column_count=2 if has_columns else 1,
            sections=[],
            horizontal_span=span,
        )
        logger.debug(
            f"[StructureDetector] span={span}, threshold={self.column_span_threshold} "
            f"-> columns={structure.column_count}"
        )
        return structure
