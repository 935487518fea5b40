"""
Abstract Base Strategy для Stage 1 Normalization.

Каждая стратегия знает формат ответа одного провайдера OCR
и превращает его в провайдер-независимый OCRPage.

Всё, что касается конкретного провайдера (синтетическая запись с полным
текстом, имена полей camelCase/snake_case, конверт "responses"),
живёт только здесь и не протекает в группировку.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional

from loguru import logger

from config.settings import DEFAULT_FRAGMENT_CONFIDENCE
from contracts.fragment_dto import BoundingBox, OCRPage, TextFragment
from ...domain.exceptions import MalformedInputError, ProviderResponseError
from ...domain.interfaces import IProviderStrategy


class AbstractProviderStrategy(IProviderStrategy):
    """
    Базовая стратегия нормализации payload провайдера.

    Подклассы реализуют name, matches() и _extract_page().
    """

    def __init__(self, default_confidence: float = DEFAULT_FRAGMENT_CONFIDENCE):
        """
        Args:
            default_confidence: Уверенность для фрагментов без confidence
        """
        self.default_confidence = default_confidence

    def normalize(self, payload: Dict[str, Any]) -> OCRPage:
        response = self._unwrap(payload)
        page = self._extract_page(response)

        logger.debug(
            f"[{self.name}] Нормализовано фрагментов: {len(page.fragments)}, "
            f"confidence={page.confidence:.3f}"
        )
        return page

    @abstractmethod
    def _extract_page(self, response: Dict[str, Any]) -> OCRPage:
        """Извлекает OCRPage из уже развёрнутого ответа провайдера."""
        pass

    # ------------------------------------------------------------------
    # Общие помощники
    # ------------------------------------------------------------------

    def _unwrap(self, payload: Any) -> Dict[str, Any]:
        """
        Снимает конверт {"responses": [...]} и проверяет поле error.

        Raises:
            MalformedInputError: payload не является JSON-объектом
            ProviderResponseError: провайдер сообщил об ошибке
        """
        if not isinstance(payload, dict):
            raise MalformedInputError(
                message=f"Ожидался JSON-объект, получено: {type(payload).__name__}",
                component=self.name,
            )

        response = payload
        if "responses" in payload:
            responses = payload["responses"]
            if not isinstance(responses, list):
                raise MalformedInputError(
                    message="Поле 'responses' должно быть списком",
                    component=self.name,
                )
            response = responses[0] if responses else {}
            if not isinstance(response, dict):
                raise MalformedInputError(
                    message="Элемент 'responses[0]' должен быть JSON-объектом",
                    component=self.name,
                )

        error = response.get("error")
        if isinstance(error, dict) and error.get("message"):
            raise ProviderResponseError(
                message=f"Провайдер вернул ошибку: {error['message']}",
                component=self.name,
            )

        return response

    def _malformed(self, message: str, original_error: Optional[Exception] = None) -> MalformedInputError:
        return MalformedInputError(
            message=message,
            component=self.name,
            original_error=original_error,
        )

    @staticmethod
    def _get(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
        """Берёт первое присутствующее поле (camelCase из REST, snake_case из proto)."""
        for key in keys:
            if key in data:
                return data[key]
        return default

    def _require_list(self, value: Any, what: str) -> List[Any]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise MalformedInputError(
                message=f"Поле '{what}' должно быть списком, получено: {type(value).__name__}",
                component=self.name,
            )
        return value

    def _box_from_vertices(self, vertices: Any, where: str) -> BoundingBox:
        """
        Преобразует полигон (4 вершины) в прямоугольник.

        Отсутствующие x/y считаются нулём: proto-JSON не сериализует нули.
        """
        if not isinstance(vertices, list) or not vertices:
            raise MalformedInputError(
                message=f"{where}: нет вершин bounding polygon",
                component=self.name,
            )

        xs = []
        ys = []
        for vertex in vertices:
            if not isinstance(vertex, dict):
                raise MalformedInputError(
                    message=f"{where}: вершина должна быть объектом {{x, y}}",
                    component=self.name,
                )
            xs.append(self._coordinate(vertex, "x", where))
            ys.append(self._coordinate(vertex, "y", where))

        x_min = max(0, min(xs))
        y_min = max(0, min(ys))
        x_max = max(0, max(xs))
        y_max = max(0, max(ys))

        return BoundingBox(
            x=x_min,
            y=y_min,
            width=x_max - x_min,
            height=y_max - y_min,
        )

    def _coordinate(self, vertex: Dict[str, Any], key: str, where: str) -> float:
        value = vertex.get(key) or 0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MalformedInputError(
                message=f"{where}: координата {key} должна быть числом, получено: {value!r}",
                component=self.name,
            )
        return value

    def _confidence(self, value: Optional[Any]) -> float:
        """Confidence провайдера, ограниченная [0, 1], либо значение по умолчанию."""
        if value is None:
            return self.default_confidence
        try:
            return max(0.0, min(1.0, float(value)))
        except (TypeError, ValueError) as e:
            raise MalformedInputError(
                message=f"Некорректная confidence: {value!r}",
                component=self.name,
                original_error=e,
            )

    def _fragment(self, text: Any, box: BoundingBox, confidence: Optional[Any], where: str) -> TextFragment:
        if not isinstance(text, str):
            raise MalformedInputError(
                message=f"{where}: нет текста",
                component=self.name,
            )
        return TextFragment(
            text=text.strip(),
            bounding_box=box,
            confidence=self._confidence(confidence),
        )
