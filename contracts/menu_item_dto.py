"""
DTO контракт: Grouping -> потребители (UI / сохранение сканов)

Результат группировки OCR-фрагментов в позиции меню.

ВАЖНО: id позиций последовательные (0, 1, 2, ...) и уникальны только
в рамках одного вызова. Глобальные идентификаторы генерирует слой сохранения.

ВАЛИДАЦИЯ: Pydantic гарантирует корректность данных.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemBoundingBox(BaseModel):
    """Объединяющий прямоугольник позиции меню (px)."""

    x: float = Field(..., ge=0, description="Левая граница")
    y: float = Field(..., ge=0, description="Верхняя граница")
    width: float = Field(..., ge=0, description="Ширина")
    height: float = Field(..., ge=0, description="Высота")

    model_config = ConfigDict(frozen=True, from_attributes=True)


class GroupedMenuItem(BaseModel):
    """
    Собранная позиция меню: одна или несколько строк, закрытых ценой.
    """

    id: int = Field(..., ge=0, description="Порядковый номер в рамках вызова")
    text: str = Field(..., description="Текст позиции (строки через перенос)")
    bounding_box: ItemBoundingBox = Field(..., description="Объединяющий прямоугольник")
    confidence: float = Field(..., ge=0, le=1, description="Средняя уверенность фрагментов")
    price: Optional[str] = Field(None, description="Цена как в тексте (например, '$12.00')")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Price must not be blank")
        return v


class ScanSummary(BaseModel):
    """
    Конверт для слоя сохранения: позиции + время + количество.

    Сам core ничего не сохраняет, только формирует структуру.
    """

    items: List[GroupedMenuItem] = Field(default_factory=list, description="Позиции меню")
    item_count: int = Field(0, ge=0, description="Количество позиций")
    created_at: datetime = Field(default_factory=datetime.now, description="Время формирования")
    provider: Optional[str] = Field(None, description="Провайдер OCR")

    model_config = ConfigDict(frozen=True, from_attributes=True)

    @field_validator("item_count")
    @classmethod
    def validate_item_count(cls, v: int, info) -> int:
        items = info.data.get("items")
        if items is not None and v != len(items):
            raise ValueError(f"item_count={v} не совпадает с количеством позиций ({len(items)})")
        return v
