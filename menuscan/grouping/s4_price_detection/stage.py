"""
Stage 4: Price Detection

ЦКП: Индексы строк, содержащих цену (границы позиций меню).

Input: LineGroupingResult (из Stage 3)
Output: PriceDetectionResult (множество индексов строк-границ)
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from loguru import logger

from ..s3_line_grouping.stage import LineGroupingResult
from .price_extractor import PriceExtractor


@dataclass
class PriceDetectionResult:
    """
    Результат Stage 4: Price Detection.

    ЦКП: Строки-границы (в них есть цена).
    """
    boundary_indices: FrozenSet[int] = field(default_factory=frozenset)
    prices: Dict[int, str] = field(default_factory=dict)    # Индекс строки -> первая цена
    total_lines: int = 0

    def is_boundary(self, line_index: int) -> bool:
        return line_index in self.boundary_indices

    def to_dict(self) -> dict:
        return {
            "boundary_indices": sorted(self.boundary_indices),
            "prices": {str(k): v for k, v in sorted(self.prices.items())},
            "total_lines": self.total_lines,
        }


class PriceDetectionStage:
    """
    Stage 4: Price Detection.

    Текст строки = фрагменты через один пробел; строка с хотя бы
    одним совпадением паттерна цены становится границей позиции.
    """

    def __init__(self, price_extractor: Optional[PriceExtractor] = None):
        """
        Args:
            price_extractor: Экстрактор цен (по умолчанию стандартный)
        """
        self.price_extractor = price_extractor or PriceExtractor()

    def process(self, layout: LineGroupingResult) -> PriceDetectionResult:
        """
        Находит строки с ценами.

        Args:
            layout: Результат Stage 3

        Returns:
            PriceDetectionResult: индексы строк-границ
        """
        prices = {}
        for index, line in enumerate(layout.lines):
            price = self.price_extractor.extract(line.text)
            if price is not None:
                prices[index] = price

        logger.info(
            f"[Stage 4: Price Detection] Найдено цен: {len(prices)} в {len(layout.lines)} строках"
        )

        return PriceDetectionResult(
            boundary_indices=frozenset(prices),
            prices=prices,
            total_lines=len(layout.lines),
        )
