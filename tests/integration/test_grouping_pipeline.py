"""
Integration-тесты GroupingPipeline: ответ провайдера -> позиции меню.

ЦКП: Полный прогон Stage 1-6 на реалистичных ответах Cloud Vision.
"""

import itertools
import json

import pytest

from contracts.fragment_dto import BoundingBox, TextFragment
from contracts.menu_item_dto import ScanSummary
from menuscan import GroupingPipeline
from menuscan.grouping import ConfidenceFilterStage
from menuscan.grouping.domain.exceptions import MalformedInputError, ProviderResponseError


def annotation(text, x, y, width=40, height=12):
    return {
        "description": text,
        "boundingPoly": {"vertices": [
            {"x": x, "y": y},
            {"x": x + width, "y": y},
            {"x": x + width, "y": y + height},
            {"x": x, "y": y + height},
        ]},
    }


def vision_payload(*annotations):
    full_text = " ".join(a["description"] for a in annotations)
    return {"responses": [{"textAnnotations": [{"description": full_text}, *annotations]}]}


def make_fragment(text, x, y, width=40, height=12, confidence=0.9):
    return TextFragment(
        text=text,
        bounding_box=BoundingBox(x=x, y=y, width=width, height=height),
        confidence=confidence,
    )


@pytest.fixture
def pipeline():
    return GroupingPipeline()


@pytest.fixture
def two_item_menu():
    """Две позиции: название строкой выше цены."""
    return vision_payload(
        annotation("Pollo", 10, 10),
        annotation("asado", 70, 12),
        annotation("$12.00", 10, 40),
        annotation("Sopa", 10, 80),
        annotation("del", 60, 81),
        annotation("día", 100, 79),
        annotation("$8.50", 10, 110),
    )


class TestScenarios:
    """Сквозные сценарии группировки."""

    def test_single_item_with_price_below(self, pipeline):
        payload = vision_payload(
            annotation("Pollo", 10, 10),
            annotation("asado", 70, 12),
            annotation("$12.00", 10, 40),
        )

        items = pipeline.process(payload).items

        assert len(items) == 1
        assert items[0].text == "Pollo asado\n$12.00"
        assert items[0].price == "$12.00"
        assert items[0].id == 0

    def test_price_on_same_line(self, pipeline):
        payload = vision_payload(
            annotation("Pollo", 10, 10),
            annotation("asado", 70, 12),
            annotation("$12.00", 300, 11),
        )

        items = pipeline.process(payload).items

        assert [item.text for item in items] == ["Pollo asado $12.00"]

    def test_menu_without_prices(self, pipeline):
        payload = vision_payload(
            annotation("ENTRANTES", 10, 10),
            annotation("Croquetas", 10, 40),
        )

        items = pipeline.process(payload).items

        assert len(items) == 1
        assert items[0].text == "ENTRANTES\nCroquetas"
        assert items[0].price is None

    def test_two_items(self, pipeline, two_item_menu):
        items = pipeline.process(two_item_menu).items

        assert [item.text for item in items] == ["Pollo asado\n$12.00", "Sopa del día\n$8.50"]
        assert [item.price for item in items] == ["$12.00", "$8.50"]
        assert [item.id for item in items] == [0, 1]

    def test_empty_response_gives_no_items(self, pipeline):
        """Снимок без текста: Cloud Vision отвечает пустым объектом."""
        result = pipeline.process({"responses": [{}]})

        assert result.items == []
        assert result.provider == "google_vision"

    def test_empty_response_with_explicit_provider(self, pipeline):
        result = pipeline.process({"responses": [{}]}, provider="google_vision")

        assert result.items == []

    def test_empty_annotations(self, pipeline):
        assert pipeline.process({"textAnnotations": []}).items == []

    def test_malformed_payload(self, pipeline):
        with pytest.raises(MalformedInputError):
            pipeline.process({"textAnnotations": [{"description": "x"}, {"description": "Pollo"}]})

    def test_provider_error(self, pipeline):
        with pytest.raises(ProviderResponseError):
            pipeline.process({"responses": [{"error": {"message": "quota exceeded"}}]}, provider="google_vision")


class TestGroupingProperties:
    """Свойства результата группировки."""

    FRAGMENTS = [
        make_fragment("Pollo", 10, 10, confidence=0.8),
        make_fragment("asado", 70, 12, confidence=0.95),
        make_fragment("$12.00", 10, 40, confidence=1.0),
        make_fragment("Sopa", 10, 80, confidence=0.7),
        make_fragment("8,50€", 200, 82, confidence=0.85),
        make_fragment("IVA", 10, 130, confidence=0.9),
    ]

    def test_every_fragment_in_exactly_one_item(self, pipeline):
        items = pipeline.group_fragments(self.FRAGMENTS)

        words = [word for item in items for word in item.text.split()]
        assert sorted(words) == sorted(f.text for f in self.FRAGMENTS)

    def test_ids_are_sequential(self, pipeline):
        items = pipeline.group_fragments(self.FRAGMENTS)

        assert [item.id for item in items] == list(range(len(items)))

    def test_only_last_line_carries_price(self, pipeline):
        items = pipeline.group_fragments(self.FRAGMENTS)

        for item in items[:-1]:
            lines = item.text.split("\n")
            assert item.price is not None
            assert item.price in lines[-1]
            assert all(item.price not in line for line in lines[:-1])
        assert items[-1].text == "IVA"
        assert items[-1].price is None

    def test_confidence_is_fragment_mean(self, pipeline):
        items = pipeline.group_fragments(self.FRAGMENTS)

        assert items[0].confidence == pytest.approx((0.8 + 0.95 + 1.0) / 3)
        assert items[1].confidence == pytest.approx((0.7 + 0.85) / 2)

    def test_bounding_box_is_tight_union(self, pipeline):
        items = pipeline.group_fragments(self.FRAGMENTS)

        box = items[1].bounding_box
        assert (box.x, box.y, box.width, box.height) == (10, 80, 230, 14)

    def test_input_order_does_not_matter(self, pipeline):
        expected = [item.text for item in pipeline.group_fragments(self.FRAGMENTS)]

        for permutation in itertools.islice(itertools.permutations(self.FRAGMENTS), 0, None, 37):
            assert [item.text for item in pipeline.group_fragments(list(permutation))] == expected

    def test_repeated_calls_are_identical(self, pipeline):
        first = pipeline.group_fragments(self.FRAGMENTS)
        second = pipeline.group_fragments(self.FRAGMENTS)

        assert first == second

    def test_empty_fragments(self, pipeline):
        assert pipeline.group_fragments([]) == []


class TestPipelineResult:
    """Промежуточные данные и сериализация."""

    def test_intermediate_results(self, pipeline, two_item_menu):
        result = pipeline.process(two_item_menu)

        assert result.provider == "google_vision"
        assert result.normalization.original_count == 7
        assert len(result.layout.lines) == 4
        assert result.prices.boundary_indices == frozenset({1, 3})
        assert len(result.segmentation.groups) == 2
        assert result.confidence_filter is None
        assert result.structure is None
        assert result.stages_completed == 5
        assert result.processing_time_ms >= 0

    def test_to_summary(self, pipeline, two_item_menu):
        summary = pipeline.process(two_item_menu).to_summary()

        assert isinstance(summary, ScanSummary)
        assert summary.item_count == 2
        assert summary.provider == "google_vision"

    def test_to_dict_is_json_serializable(self, pipeline, two_item_menu):
        data = pipeline.process(two_item_menu).to_dict()

        decoded = json.loads(json.dumps(data, ensure_ascii=False))
        assert decoded["items"][1]["text"] == "Sopa del día\n$8.50"
        assert decoded["prices"]["boundary_indices"] == [1, 3]

    def test_analyze_layout(self, two_item_menu):
        result = GroupingPipeline(analyze_layout=True).process(two_item_menu)

        assert result.structure is not None
        assert result.structure.column_count == 1
        assert result.clusters is not None
        assert sum(len(cluster) for cluster in result.clusters) == 7
        assert result.to_dict()["clusters"][0][0] == "Pollo"

    def test_layout_heuristics_off_by_default(self, pipeline, two_item_menu):
        result = pipeline.process(two_item_menu)

        assert result.clusters is None
        assert result.to_dict()["clusters"] is None

    def test_confidence_filter_stage(self):
        payload = {"fragments": [
            {"text": "Pollo", "bounding_box": {"x": 10, "y": 10, "width": 40, "height": 12}, "confidence": 0.95},
            {"text": "~#", "bounding_box": {"x": 60, "y": 10, "width": 10, "height": 12}, "confidence": 0.2},
            {"text": "$12.00", "bounding_box": {"x": 10, "y": 40, "width": 40, "height": 12}, "confidence": 0.9},
        ]}

        result = GroupingPipeline(confidence_filter_stage=ConfidenceFilterStage(0.5)).process(payload)

        assert result.provider == "fragments"
        assert result.confidence_filter.removed_count == 1
        assert [item.text for item in result.items] == ["Pollo\n$12.00"]
        assert result.stages_completed == 6
