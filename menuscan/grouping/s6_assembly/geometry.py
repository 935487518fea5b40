"""
Геометрия и статистика группы фрагментов.
"""

from typing import Iterable, List

from contracts.fragment_dto import BoundingBox, TextFragment


def union_bounding_box(boxes: Iterable[BoundingBox]) -> BoundingBox:
    """
    Минимальный прямоугольник, покрывающий все боксы.

    Raises:
        ValueError: если боксов нет
    """
    boxes = list(boxes)
    if not boxes:
        raise ValueError("union_bounding_box() требует хотя бы один бокс")

    x_min = min(b.x for b in boxes)
    y_min = min(b.y for b in boxes)
    x_max = max(b.right for b in boxes)
    y_max = max(b.bottom for b in boxes)

    return BoundingBox(x=x_min, y=y_min, width=x_max - x_min, height=y_max - y_min)


def mean_confidence(fragments: List[TextFragment]) -> float:
    """
    Среднее арифметическое confidence фрагментов.

    Raises:
        ValueError: если фрагментов нет
    """
    if not fragments:
        raise ValueError("mean_confidence() требует хотя бы один фрагмент")
    return sum(f.confidence for f in fragments) / len(fragments)
