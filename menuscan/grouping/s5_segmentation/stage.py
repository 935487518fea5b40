"""
Stage 5: Item Segmentation

ЦКП: Разбиение строк на группы (будущие позиции меню).

Input: LineGroupingResult (Stage 3) + PriceDetectionResult (Stage 4)
Output: SegmentationResult (группы подряд идущих строк)

Машина состояний с одним буфером:
- Accumulate: строка добавляется в буфер
- Boundary: строка с ценой закрывает буфер как группу (следующий id)
- Flush: после последней строки непустой буфер становится последней группой
  (позиция без цены, например продолжение текста внизу меню)

Без возвратов: каждая строка обрабатывается ровно один раз.
"""

from dataclasses import dataclass, field
from typing import List

from loguru import logger

from contracts.fragment_dto import TextFragment
from ..s3_line_grouping.stage import Line, LineGroupingResult
from ..s4_price_detection.stage import PriceDetectionResult


@dataclass
class MenuItemGroup:
    """
    Группа подряд идущих строк, закрытая ценой (или концом меню).
    """
    id: int
    lines: List[Line] = field(default_factory=list)
    closed_by_price: bool = False

    @property
    def fragments(self) -> List[TextFragment]:
        """Все фрагменты группы (строка за строкой, слева направо)."""
        return [fragment for line in self.lines for fragment in line.fragments]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "line_numbers": [line.line_number for line in self.lines],
            "closed_by_price": self.closed_by_price,
        }


@dataclass
class SegmentationResult:
    """
    Результат Stage 5: Item Segmentation.

    ЦКП: Группы строк в порядке чтения.
    """
    groups: List[MenuItemGroup] = field(default_factory=list)

    @property
    def priceless_count(self) -> int:
        return sum(1 for g in self.groups if not g.closed_by_price)

    def to_dict(self) -> dict:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "total_groups": len(self.groups),
            "priceless_count": self.priceless_count,
        }


class ItemSegmentationStage:
    """
    Stage 5: Item Segmentation.

    ЦКП: Строка с ценой - последняя строка своей позиции,
    следующая строка начинает новую позицию.
    """

    def process(
        self,
        layout: LineGroupingResult,
        prices: PriceDetectionResult,
    ) -> SegmentationResult:
        """
        Разбивает строки на группы.

        Args:
            layout: Результат Stage 3
            prices: Результат Stage 4

        Returns:
            SegmentationResult: группы с последовательными id от 0
        """
        groups: List[MenuItemGroup] = []
        buffer: List[Line] = []

        for index, line in enumerate(layout.lines):
            buffer.append(line)

            if prices.is_boundary(index):
                groups.append(MenuItemGroup(id=len(groups), lines=buffer, closed_by_price=True))
                buffer = []

        # Хвост без цены
        if buffer:
            logger.debug(f"[Stage 5: Segmentation] Хвост без цены: {len(buffer)} строк")
            groups.append(MenuItemGroup(id=len(groups), lines=buffer, closed_by_price=False))

        result = SegmentationResult(groups=groups)
        logger.info(
            f"[Stage 5: Segmentation] Результат: {len(groups)} групп "
            f"({result.priceless_count} без цены) из {len(layout.lines)} строк"
        )
        return result
