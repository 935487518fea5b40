"""
Stage 3: Line Grouping

ЦКП: Преобразование fragments[] в упорядоченные строки.

Input: OCRPage.fragments[] (из Stage 1/2)
Output: LineGroupingResult (строки сверху вниз, фрагменты слева направо)

Алгоритм:
1. Сортировка фрагментов по Y (при равенстве - по X, затем по тексту и confidence)
2. Первая строка якорится на первом фрагменте: anchor_y = fragment.y
3. |y - anchor_y| <= line_threshold -> та же строка, иначе новая строка с новым якорем
4. Фрагменты строки сортируются по X

Якорь НЕ пересчитывается по мере добавления фрагментов: "дрейфующая"
последовательность (каждый фрагмент близко к предыдущему, но всё дальше
от первого) всё равно может склеиться в одну высокую строку, пока каждый
фрагмент в пределах порога от якоря.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from loguru import logger

from config.settings import LINE_THRESHOLD
from contracts.fragment_dto import TextFragment
from ..domain.exceptions import GroupingConfigurationError


@dataclass
class Line:
    """
    Строка текста меню.

    Результат группировки fragments[] по Y-координате.
    """
    fragments: List[TextFragment]       # Фрагменты слева направо
    anchor_y: float                     # Y якорного фрагмента
    line_number: int = 0                # Номер строки (сверху вниз)

    @property
    def text(self) -> str:
        """Текст строки (фрагменты через пробел)."""
        return " ".join(f.text for f in self.fragments)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "anchor_y": self.anchor_y,
            "line_number": self.line_number,
            "fragments_count": len(self.fragments),
        }


@dataclass
class LineGroupingResult:
    """
    Результат Stage 3: Line Grouping.

    ЦКП: Упорядоченные строки текста.
    """
    lines: List[Line] = field(default_factory=list)
    total_fragments: int = 0

    @property
    def full_text(self) -> str:
        """Полный текст (все строки через перенос)."""
        return "\n".join(line.text for line in self.lines)

    @property
    def texts(self) -> List[str]:
        """Список текстов строк."""
        return [line.text for line in self.lines]

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "total_fragments": self.total_fragments,
            "total_lines": len(self.lines),
        }


class LineGroupingStage:
    """
    Stage 3: Line Grouping.

    Использует Y-координаты для группировки фрагментов в строки,
    X-координаты для сортировки фрагментов внутри строки.
    """

    def __init__(self, line_threshold: float = LINE_THRESHOLD):
        """
        Args:
            line_threshold: Максимальная разница Y с якорем строки (px).
                            Фрагменты с разницей Y <= threshold считаются одной строкой.
        """
        if line_threshold < 0:
            raise GroupingConfigurationError(
                message=f"line_threshold не может быть отрицательным: {line_threshold}",
                component="LineGroupingStage",
            )
        self.line_threshold = line_threshold

    def process(self, fragments: List[TextFragment]) -> LineGroupingResult:
        """
        Группирует фрагменты в строки.

        Args:
            fragments: Фрагменты в любом порядке

        Returns:
            LineGroupingResult: строки сверху вниз
        """
        logger.debug(f"[Stage 3: Line Grouping] Обработка {len(fragments)} фрагментов")

        if not fragments:
            logger.warning("[Stage 3: Line Grouping] Нет фрагментов для обработки")
            return LineGroupingResult()

        grouped = self._group_into_lines(fragments)
        lines = [
            Line(fragments=members, anchor_y=anchor_y, line_number=i)
            for i, (anchor_y, members) in enumerate(grouped)
        ]

        logger.info(f"[Stage 3: Line Grouping] Результат: {len(lines)} строк из {len(fragments)} фрагментов")

        return LineGroupingResult(lines=lines, total_fragments=len(fragments))

    def _group_into_lines(self, fragments: List[TextFragment]) -> List[Tuple[float, List[TextFragment]]]:
        """
        Группирует фрагменты в строки по Y-координате.

        Returns:
            Список пар (anchor_y, фрагменты строки слева направо)
        """
        # Сортируем по Y (сверху вниз), остальное - только для устойчивости порядка
        sorted_fragments = sorted(
            fragments,
            key=lambda f: (f.bounding_box.y, f.bounding_box.x, f.text, f.confidence),
        )

        lines = []
        current_line = [sorted_fragments[0]]
        anchor_y = sorted_fragments[0].bounding_box.y

        for fragment in sorted_fragments[1:]:
            if abs(fragment.bounding_box.y - anchor_y) <= self.line_threshold:
                current_line.append(fragment)
            else:
                lines.append((anchor_y, self._sort_line(current_line)))

                # Начинаем новую строку
                current_line = [fragment]
                anchor_y = fragment.bounding_box.y

        # Добавляем последнюю строку
        lines.append((anchor_y, self._sort_line(current_line)))

        return lines

    @staticmethod
    def _sort_line(fragments: List[TextFragment]) -> List[TextFragment]:
        return sorted(
            fragments,
            key=lambda f: (f.bounding_box.x, f.bounding_box.y, f.text, f.confidence),
        )
