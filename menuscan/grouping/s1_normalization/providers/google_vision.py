"""
Google Cloud Vision - ответ TEXT_DETECTION (REST images:annotate).

Формат:
    {"textAnnotations": [
        {"description": "<весь текст>", "boundingPoly": {...}},   # синтетическая запись
        {"description": "Pollo", "boundingPoly": {"vertices": [...]}},
        ...
    ]}

Первая аннотация - агрегат всей страницы. Она не является фрагментом
и уходит только в OCRPage.full_text.
"""

from typing import Any, Dict

from contracts.fragment_dto import OCRPage
from .base import AbstractProviderStrategy


class GoogleVisionStrategy(AbstractProviderStrategy):
    """
    Нормализация ответа Cloud Vision TEXT_DETECTION.

    Confidence в этом ответе обычно отсутствует -> DEFAULT_FRAGMENT_CONFIDENCE.
    """

    @property
    def name(self) -> str:
        return "google_vision"

    def matches(self, payload: Dict[str, Any]) -> bool:
        response = self._unwrap(payload)
        # На снимок без текста Cloud Vision отвечает пустым объектом {"responses": [{}]}
        if not response:
            return True
        return "textAnnotations" in response or "text_annotations" in response

    def _extract_page(self, response: Dict[str, Any]) -> OCRPage:
        annotations = self._require_list(
            self._get(response, "textAnnotations", "text_annotations"),
            "textAnnotations",
        )

        if not annotations:
            return OCRPage(full_text="", fragments=[], confidence=0.0, provider=self.name)

        full_page = annotations[0]
        if not isinstance(full_page, dict):
            raise self._malformed("Аннотация #0 должна быть JSON-объектом")
        full_text = full_page.get("description") or ""

        fragments = []
        for i, annotation in enumerate(annotations[1:], start=1):
            where = f"Аннотация #{i}"
            if not isinstance(annotation, dict):
                raise self._malformed(f"{where} должна быть JSON-объектом")

            poly = self._get(annotation, "boundingPoly", "bounding_poly")
            if not isinstance(poly, dict):
                raise self._malformed(f"{where}: нет boundingPoly")

            box = self._box_from_vertices(poly.get("vertices"), where)
            fragments.append(self._fragment(
                annotation.get("description"),
                box,
                annotation.get("confidence"),
                where,
            ))

        return OCRPage.from_fragments(fragments, full_text=full_text, provider=self.name)
