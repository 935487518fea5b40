"""
Unit-тесты для Stage 1: Normalization и стратегий провайдеров.

ЦКП: Ответ провайдера -> OCRPage без синтетической full-page записи.
"""

import pytest

from contracts.fragment_dto import BoundingBox, OCRPage, TextFragment
from menuscan.grouping.domain.exceptions import (
    GroupingConfigurationError,
    MalformedInputError,
    ProviderResponseError,
)
from menuscan.grouping.s1_normalization import NormalizationStage, ProviderStrategyFactory
from menuscan.grouping.s1_normalization.providers import (
    AbstractProviderStrategy,
    FragmentsStrategy,
    GoogleVisionDocumentStrategy,
    GoogleVisionStrategy,
)


def annotation(text, x, y, width, height, confidence=None):
    """Аннотация Cloud Vision с прямоугольным boundingPoly."""
    data = {
        "description": text,
        "boundingPoly": {"vertices": [
            {"x": x, "y": y},
            {"x": x + width, "y": y},
            {"x": x + width, "y": y + height},
            {"x": x, "y": y + height},
        ]},
    }
    if confidence is not None:
        data["confidence"] = confidence
    return data


def vision_payload(*annotations, full_text="Pollo asado\n$12.00"):
    return {"textAnnotations": [{"description": full_text}, *annotations]}


def document_word(text, x, y, width, height, confidence):
    return {
        "boundingBox": {"vertices": [
            {"x": x, "y": y},
            {"x": x + width, "y": y},
            {"x": x + width, "y": y + height},
            {"x": x, "y": y + height},
        ]},
        "symbols": [{"text": ch} for ch in text],
        "confidence": confidence,
    }


def document_payload(*words, text="Pollo asado"):
    return {"fullTextAnnotation": {
        "text": text,
        "pages": [{"blocks": [{"paragraphs": [{"words": list(words)}]}]}],
    }}


@pytest.fixture
def stage():
    return NormalizationStage()


class TestGoogleVisionStrategy:
    """TEXT_DETECTION: textAnnotations[]."""

    def test_full_page_annotation_is_not_a_fragment(self):
        payload = vision_payload(
            annotation("Pollo", 10, 10, 50, 20),
            annotation("asado", 70, 12, 40, 18),
        )

        page = GoogleVisionStrategy().normalize(payload)

        assert [f.text for f in page.fragments] == ["Pollo", "asado"]
        assert page.full_text == "Pollo asado\n$12.00"
        assert page.provider == "google_vision"

    def test_polygon_converted_to_box(self):
        page = GoogleVisionStrategy().normalize(vision_payload(annotation("Pollo", 10, 10, 50, 20)))

        assert page.fragments[0].bounding_box == BoundingBox(x=10, y=10, width=50, height=20)

    def test_missing_coordinates_are_zero(self):
        payload = vision_payload({
            "description": "Carta",
            "boundingPoly": {"vertices": [{}, {"x": 30}, {"x": 30, "y": 12}, {"y": 12}]},
        })

        page = GoogleVisionStrategy().normalize(payload)

        assert page.fragments[0].bounding_box == BoundingBox(x=0, y=0, width=30, height=12)

    def test_default_confidence(self):
        page = GoogleVisionStrategy().normalize(vision_payload(annotation("Pollo", 10, 10, 50, 20)))

        assert page.fragments[0].confidence == 0.9
        assert page.confidence == pytest.approx(0.9)

    def test_custom_default_confidence(self):
        strategy = GoogleVisionStrategy(default_confidence=0.5)

        page = strategy.normalize(vision_payload(annotation("Pollo", 10, 10, 50, 20)))

        assert page.fragments[0].confidence == 0.5

    def test_provider_confidence_is_clamped(self):
        page = GoogleVisionStrategy().normalize(
            vision_payload(annotation("Pollo", 10, 10, 50, 20, confidence=1.3))
        )

        assert page.fragments[0].confidence == 1.0

    def test_responses_envelope(self):
        payload = {"responses": [vision_payload(annotation("Pollo", 10, 10, 50, 20))]}

        page = GoogleVisionStrategy().normalize(payload)

        assert [f.text for f in page.fragments] == ["Pollo"]

    def test_snake_case_fields(self):
        payload = {"text_annotations": [
            {"description": "Pollo"},
            {"description": "Pollo", "bounding_poly": {"vertices": [{"x": 1, "y": 2}, {"x": 11, "y": 12}]}},
        ]}

        page = GoogleVisionStrategy().normalize(payload)

        assert page.fragments[0].bounding_box == BoundingBox(x=1, y=2, width=10, height=10)

    def test_empty_annotations_give_empty_page(self):
        page = GoogleVisionStrategy().normalize({"textAnnotations": []})

        assert page.fragments == []
        assert not page.has_content()

    @pytest.mark.parametrize("vertex", [
        {"x": "10", "y": 10},
        {"x": 10, "y": [1]},
        {"x": True, "y": 10},
    ])
    def test_non_numeric_coordinate_is_malformed(self, vertex):
        payload = vision_payload({
            "description": "Pollo",
            "boundingPoly": {"vertices": [vertex, {"x": 50, "y": 30}]},
        })

        with pytest.raises(MalformedInputError):
            GoogleVisionStrategy().normalize(payload)

    def test_missing_bounding_poly_is_malformed(self):
        payload = vision_payload({"description": "Pollo"})

        with pytest.raises(MalformedInputError):
            GoogleVisionStrategy().normalize(payload)

    def test_missing_description_is_malformed(self):
        payload = vision_payload({"boundingPoly": {"vertices": [{"x": 1, "y": 1}]}})

        with pytest.raises(MalformedInputError):
            GoogleVisionStrategy().normalize(payload)

    def test_annotations_must_be_list(self):
        with pytest.raises(MalformedInputError):
            GoogleVisionStrategy().normalize({"textAnnotations": "Pollo"})

    def test_provider_error(self):
        payload = {"responses": [{"error": {"code": 3, "message": "Bad image data."}}]}

        with pytest.raises(ProviderResponseError) as exc_info:
            GoogleVisionStrategy().normalize(payload)

        assert "Bad image data." in str(exc_info.value)

    def test_non_dict_payload_is_malformed(self):
        with pytest.raises(MalformedInputError):
            GoogleVisionStrategy().normalize(["Pollo"])


class TestGoogleVisionDocumentStrategy:
    """DOCUMENT_TEXT_DETECTION: fullTextAnnotation.pages[]...words[]."""

    def test_words_become_fragments(self):
        payload = document_payload(
            document_word("Pollo", 10, 10, 50, 20, 0.98),
            document_word("asado", 70, 12, 40, 18, 0.92),
        )

        page = GoogleVisionDocumentStrategy().normalize(payload)

        assert [f.text for f in page.fragments] == ["Pollo", "asado"]
        assert [f.confidence for f in page.fragments] == [0.98, 0.92]
        assert page.confidence == pytest.approx(0.95)
        assert page.full_text == "Pollo asado"

    def test_word_without_symbols_is_malformed(self):
        word = document_word("Pollo", 10, 10, 50, 20, 0.98)
        word["symbols"] = []

        with pytest.raises(MalformedInputError):
            GoogleVisionDocumentStrategy().normalize(document_payload(word))

    def test_missing_annotation_gives_empty_page(self):
        page = GoogleVisionDocumentStrategy().normalize({})

        assert page.fragments == []


class TestFragmentsStrategy:
    """Собственный формат OCRPage.to_dict()."""

    def test_roundtrip_of_page_dict(self):
        original = OCRPage.from_fragments(
            [TextFragment("Pollo", BoundingBox(10, 10, 50, 20), 0.8)],
            provider="fragments",
        )

        page = FragmentsStrategy().normalize(original.to_dict())

        assert page.fragments == original.fragments

    def test_incomplete_box_is_malformed(self):
        payload = {"fragments": [{"text": "Pollo", "bounding_box": {"x": 10, "y": 10}}]}

        with pytest.raises(MalformedInputError):
            FragmentsStrategy().normalize(payload)


class TestProviderStrategyFactory:
    """Выбор стратегии."""

    def test_get_by_name(self):
        factory = ProviderStrategyFactory()

        assert isinstance(factory.get("google_vision"), GoogleVisionStrategy)
        assert isinstance(factory.get(" Google_Vision "), GoogleVisionStrategy)

    def test_unknown_provider(self):
        with pytest.raises(GroupingConfigurationError):
            ProviderStrategyFactory().get("tesseract")

    @pytest.mark.parametrize("payload, expected", [
        ({"textAnnotations": []}, "google_vision"),
        ({"responses": [{"textAnnotations": []}]}, "google_vision"),
        ({"fullTextAnnotation": {}}, "google_vision_document"),
        ({"textAnnotations": [], "fullTextAnnotation": {}}, "google_vision_document"),
        ({"fragments": []}, "fragments"),
    ])
    def test_detect(self, payload, expected):
        assert ProviderStrategyFactory().detect(payload).name == expected

    @pytest.mark.parametrize("payload", [
        {"responses": [{}]},
        {"responses": []},
        {},
    ])
    def test_detect_empty_response_as_vision(self, payload):
        """Cloud Vision отвечает на снимок без текста пустым объектом."""
        assert ProviderStrategyFactory().detect(payload).name == "google_vision"

    def test_detect_provider_error(self):
        with pytest.raises(ProviderResponseError):
            ProviderStrategyFactory().detect({"responses": [{"error": {"message": "Bad image data."}}]})

    def test_unrecognized_payload(self):
        with pytest.raises(MalformedInputError):
            ProviderStrategyFactory().detect({"foo": "bar"})

    def test_register_custom_strategy(self):
        class StubStrategy(AbstractProviderStrategy):
            @property
            def name(self):
                return "stub"

            def matches(self, payload):
                return "stub" in payload

            def _extract_page(self, response):
                return OCRPage.from_fragments([], provider=self.name)

        factory = ProviderStrategyFactory()
        factory.register(StubStrategy())

        assert "stub" in factory.providers
        assert factory.detect({"stub": True}).name == "stub"


class TestNormalizationStage:
    """Stage 1 целиком."""

    def test_auto_detect_provider(self, stage):
        result = stage.process(vision_payload(annotation("Pollo", 10, 10, 50, 20)))

        assert result.provider == "google_vision"
        assert len(result.page.fragments) == 1

    def test_blank_fragments_are_dropped(self, stage):
        payload = vision_payload(
            annotation("Pollo", 10, 10, 50, 20),
            annotation("   ", 70, 12, 40, 18),
        )

        result = stage.process(payload, provider="google_vision")

        assert [f.text for f in result.page.fragments] == ["Pollo"]
        assert result.original_count == 2
        assert result.dropped_count == 1

    def test_empty_response_auto_detect(self, stage):
        result = stage.process({"responses": [{}]})

        assert result.provider == "google_vision"
        assert result.page.fragments == []

    def test_non_dict_payload(self, stage):
        with pytest.raises(MalformedInputError):
            stage.process("not json")

    def test_to_dict(self, stage):
        result = stage.process(vision_payload(annotation("Pollo", 10, 10, 50, 20)))

        assert result.to_dict()["fragments_count"] == 1
