"""
Собственный провайдер-независимый формат (OCRPage.to_dict()).

Формат:
    {"full_text": "...", "fragments": [
        {"text": "Pollo", "bounding_box": {"x": 10, "y": 10, "width": 50, "height": 20},
         "confidence": 0.95},
        ...
    ]}
"""

from typing import Any, Dict

from contracts.fragment_dto import BoundingBox, OCRPage
from .base import AbstractProviderStrategy


class FragmentsStrategy(AbstractProviderStrategy):
    """Чтение уже нормализованных фрагментов (например, сохранённых ранее)."""

    @property
    def name(self) -> str:
        return "fragments"

    def matches(self, payload: Dict[str, Any]) -> bool:
        return isinstance(payload, dict) and "fragments" in payload

    def _extract_page(self, response: Dict[str, Any]) -> OCRPage:
        items = self._require_list(response.get("fragments"), "fragments")

        fragments = []
        for i, item in enumerate(items):
            where = f"Фрагмент #{i}"
            if not isinstance(item, dict):
                raise self._malformed(f"{where} должен быть JSON-объектом")

            box_data = self._get(item, "bounding_box", "boundingBox")
            if not isinstance(box_data, dict):
                raise self._malformed(f"{where}: нет bounding_box")

            try:
                box = BoundingBox(
                    x=max(0, box_data["x"]),
                    y=max(0, box_data["y"]),
                    width=max(0, box_data["width"]),
                    height=max(0, box_data["height"]),
                )
            except (KeyError, TypeError) as e:
                raise self._malformed(f"{where}: неполный bounding_box", original_error=e)

            fragments.append(self._fragment(item.get("text"), box, item.get("confidence"), where))

        full_text = response.get("full_text")
        return OCRPage.from_fragments(
            fragments,
            full_text=full_text if isinstance(full_text, str) else None,
            provider=self.name,
        )
