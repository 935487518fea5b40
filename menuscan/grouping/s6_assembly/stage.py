"""
Stage 6: Item Assembly

ЦКП: GroupedMenuItem для каждой группы строк.

Input: SegmentationResult (из Stage 5)
Output: AssemblyResult (позиции меню в порядке чтения)

Для группы:
- text: строки через перенос строки, фрагменты внутри строки через пробел
- bounding_box: объединяющий прямоугольник всех фрагментов
- confidence: среднее арифметическое confidence всех фрагментов
- price: первая цена в text (тот же паттерн, что в Stage 4)
"""

from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from contracts.menu_item_dto import GroupedMenuItem, ItemBoundingBox
from ..domain.exceptions import ContractValidationError, EmptyGroupError
from ..s4_price_detection.price_extractor import PriceExtractor
from ..s5_segmentation.stage import MenuItemGroup, SegmentationResult
from .geometry import mean_confidence, union_bounding_box


@dataclass
class AssemblyResult:
    """
    Результат Stage 6: Item Assembly.

    ЦКП: Готовые позиции меню.
    """
    items: List[GroupedMenuItem] = field(default_factory=list)

    @property
    def priced_count(self) -> int:
        return sum(1 for item in self.items if item.price is not None)

    def to_dict(self) -> dict:
        return {
            "items": [item.model_dump(mode="json") for item in self.items],
            "total_items": len(self.items),
            "priced_count": self.priced_count,
        }


class ItemAssemblyStage:
    """
    Stage 6: Item Assembly.

    Пустая группа - ошибка программы (EmptyGroupError), а не пустой результат:
    Stage 5 никогда не выдаёт групп без строк.
    """

    def __init__(self, price_extractor: Optional[PriceExtractor] = None):
        """
        Args:
            price_extractor: Экстрактор цен (по умолчанию стандартный)
        """
        self.price_extractor = price_extractor or PriceExtractor()

    def process(self, segmentation: SegmentationResult) -> AssemblyResult:
        """
        Собирает позиции меню.

        Args:
            segmentation: Результат Stage 5

        Returns:
            AssemblyResult: позиции в порядке групп
        """
        items = [self.assemble(group) for group in segmentation.groups]

        result = AssemblyResult(items=items)
        logger.info(
            f"[Stage 6: Assembly] Собрано позиций: {len(items)} "
            f"(с ценой: {result.priced_count})"
        )
        return result

    def assemble(self, group: MenuItemGroup) -> GroupedMenuItem:
        """
        Собирает одну позицию из группы строк.

        Raises:
            EmptyGroupError: в группе нет фрагментов
            ContractValidationError: результат нарушает контракт GroupedMenuItem
        """
        fragments = group.fragments
        if not fragments:
            raise EmptyGroupError(
                message=f"Группа #{group.id} не содержит фрагментов",
                component="ItemAssemblyStage",
            )

        text = "\n".join(line.text for line in group.lines)
        box = union_bounding_box(f.bounding_box for f in fragments)

        try:
            return GroupedMenuItem(
                id=group.id,
                text=text,
                bounding_box=ItemBoundingBox(
                    x=box.x,
                    y=box.y,
                    width=box.width,
                    height=box.height,
                ),
                confidence=mean_confidence(fragments),
                price=self.price_extractor.extract(text),
            )
        except ValidationError as e:
            raise ContractValidationError("Stage 6: Assembly", "GroupedMenuItem", e.errors())
