"""
Google Cloud Vision - ответ DOCUMENT_TEXT_DETECTION.

Иерархия: fullTextAnnotation.pages[].blocks[].paragraphs[].words[].symbols[]
Текст слова = конкатенация symbols[].text, confidence есть у каждого слова.
"""

from typing import Any, Dict, List

from contracts.fragment_dto import OCRPage, TextFragment
from .base import AbstractProviderStrategy


class GoogleVisionDocumentStrategy(AbstractProviderStrategy):
    """
    Нормализация ответа Cloud Vision DOCUMENT_TEXT_DETECTION (по словам).

    Предпочтительнее TEXT_DETECTION: у каждого слова есть реальная confidence.
    """

    @property
    def name(self) -> str:
        return "google_vision_document"

    def matches(self, payload: Dict[str, Any]) -> bool:
        response = self._unwrap(payload)
        return "fullTextAnnotation" in response or "full_text_annotation" in response

    def _extract_page(self, response: Dict[str, Any]) -> OCRPage:
        annotation = self._get(response, "fullTextAnnotation", "full_text_annotation")

        if annotation is None:
            return OCRPage(full_text="", fragments=[], confidence=0.0, provider=self.name)
        if not isinstance(annotation, dict):
            raise self._malformed("Поле 'fullTextAnnotation' должно быть JSON-объектом")

        fragments: List[TextFragment] = []
        pages = self._require_list(annotation.get("pages"), "pages")

        for p, page in enumerate(pages):
            for b, block in enumerate(self._children(page, "blocks")):
                for r, paragraph in enumerate(self._children(block, "paragraphs")):
                    for w, word in enumerate(self._children(paragraph, "words")):
                        where = f"Слово p{p}/b{b}/r{r}/w{w}"
                        fragments.append(self._word_to_fragment(word, where))

        return OCRPage.from_fragments(
            fragments,
            full_text=annotation.get("text") or "",
            provider=self.name,
        )

    def _word_to_fragment(self, word: Any, where: str) -> TextFragment:
        if not isinstance(word, dict):
            raise self._malformed(f"{where} должно быть JSON-объектом")

        symbols = self._require_list(word.get("symbols"), "symbols")
        if not symbols:
            raise self._malformed(f"{where}: нет symbols")
        try:
            text = "".join(symbol["text"] for symbol in symbols)
        except (KeyError, TypeError) as e:
            raise self._malformed(f"{where}: symbol без текста", original_error=e)

        poly = self._get(word, "boundingBox", "bounding_box")
        if not isinstance(poly, dict):
            raise self._malformed(f"{where}: нет boundingBox")

        box = self._box_from_vertices(poly.get("vertices"), where)
        return self._fragment(text, box, word.get("confidence"), where)

    def _children(self, node: Any, key: str) -> List[Any]:
        if not isinstance(node, dict):
            raise self._malformed(f"Узел с '{key}' должен быть JSON-объектом")
        return self._require_list(node.get(key), key)
