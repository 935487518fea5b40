"""
DTO контракт: S1 (Normalization) -> S2..S6 (Grouping)

Провайдер-независимое представление результата OCR.
Всё, что специфично для конкретного провайдера (Google Vision и т.д.),
заканчивается в S1 - дальше идут только эти структуры.

ВАЖНО: Все структуры неизменяемые (frozen) после создания нормализатором.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    Координаты фрагмента на изображении (px, неотрицательные).
    """
    x: float          # Левый верхний угол X
    y: float          # Левый верхний угол Y
    width: float      # Ширина
    height: float     # Высота

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass(frozen=True)
class TextFragment:
    """
    Один распознанный OCR токен/фраза.

    Используется для:
    - Группировки фрагментов в строки по Y-координате
    - Упорядочивания внутри строки по X-координате
    - Оценки качества распознавания (confidence)
    """
    text: str                    # Текст фрагмента
    bounding_box: BoundingBox    # Координаты на изображении
    confidence: float = 0.9      # Уверенность OCR (0.0 - 1.0)

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "bounding_box": self.bounding_box.to_dict(),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class OCRPage:
    """
    Нормализованный результат OCR для одного снимка.

    Содержит ДВА представления данных:
    1. full_text - агрегированный текст страницы (если провайдер его прислал)
    2. fragments[] - фрагменты с координатами для группировки
    """
    full_text: str = ""
    fragments: List[TextFragment] = field(default_factory=list)
    confidence: float = 0.0      # Средняя уверенность фрагментов
    provider: Optional[str] = None

    @classmethod
    def from_fragments(
        cls,
        fragments: List[TextFragment],
        full_text: Optional[str] = None,
        provider: Optional[str] = None,
    ) -> "OCRPage":
        """Создаёт OCRPage, пересчитывая среднюю уверенность."""
        confidence = (
            sum(f.confidence for f in fragments) / len(fragments) if fragments else 0.0
        )
        if full_text is None:
            full_text = " ".join(f.text for f in fragments)
        return cls(
            full_text=full_text,
            fragments=list(fragments),
            confidence=confidence,
            provider=provider,
        )

    def bounding_boxes(self) -> List[BoundingBox]:
        """Список боксов всех фрагментов (в исходном порядке)."""
        return [f.bounding_box for f in self.fragments]

    def has_content(self) -> bool:
        return bool(self.fragments)

    def to_dict(self) -> dict:
        return {
            "full_text": self.full_text,
            "fragments": [f.to_dict() for f in self.fragments],
            "confidence": self.confidence,
            "provider": self.provider,
        }
