"""
Unit-тесты для Stage 3: Line Grouping.

ЦКП: Фрагменты -> строки сверху вниз, внутри строки слева направо.
"""

import itertools

import pytest

from contracts.fragment_dto import BoundingBox, TextFragment
from menuscan.grouping.domain.exceptions import GroupingConfigurationError
from menuscan.grouping.s3_line_grouping import LineGroupingStage


def make_fragment(text: str, x: float, y: float, width: float = 40, height: float = 12,
                  confidence: float = 0.9) -> TextFragment:
    """Создаёт TextFragment с заданными координатами."""
    return TextFragment(
        text=text,
        bounding_box=BoundingBox(x=x, y=y, width=width, height=height),
        confidence=confidence,
    )


@pytest.fixture
def stage():
    return LineGroupingStage(line_threshold=15)


class TestLineGroupingBasics:
    """Базовые случаи группировки."""

    def test_empty_input_gives_no_lines(self, stage):
        result = stage.process([])

        assert result.lines == []
        assert result.total_fragments == 0
        assert result.full_text == ""

    def test_single_fragment_gives_single_line(self, stage):
        result = stage.process([make_fragment("Pollo", x=10, y=10)])

        assert len(result.lines) == 1
        assert result.lines[0].text == "Pollo"
        assert result.lines[0].anchor_y == 10

    def test_pollo_asado_price_on_next_line(self, stage):
        fragments = [
            make_fragment("$12.00", x=10, y=40),
            make_fragment("asado", x=70, y=12),
            make_fragment("Pollo", x=10, y=10),
        ]

        result = stage.process(fragments)

        assert result.texts == ["Pollo asado", "$12.00"]
        assert [line.line_number for line in result.lines] == [0, 1]

    def test_fragments_sorted_left_to_right(self, stage):
        fragments = [
            make_fragment("c", x=200, y=10),
            make_fragment("a", x=0, y=14),
            make_fragment("b", x=100, y=5),
        ]

        result = stage.process(fragments)

        assert result.texts == ["a b c"]


class TestLineThreshold:
    """Граница порога и закреплённый якорь."""

    def test_threshold_is_inclusive(self, stage):
        result = stage.process([
            make_fragment("top", x=0, y=0),
            make_fragment("same", x=50, y=15),
        ])

        assert len(result.lines) == 1

    def test_beyond_threshold_starts_new_line(self, stage):
        result = stage.process([
            make_fragment("top", x=0, y=0),
            make_fragment("next", x=50, y=16),
        ])

        assert result.texts == ["top", "next"]

    def test_anchor_is_not_recomputed(self, stage):
        """y=16 в 6px от соседа, но в 16px от якоря (y=0) -> новая строка."""
        result = stage.process([
            make_fragment("a", x=0, y=0),
            make_fragment("b", x=50, y=10),
            make_fragment("c", x=100, y=16),
        ])

        assert result.texts == ["a b", "c"]
        assert result.lines[1].anchor_y == 16

    def test_new_anchor_after_line_break(self, stage):
        result = stage.process([
            make_fragment("a", x=0, y=0),
            make_fragment("b", x=0, y=20),
            make_fragment("c", x=50, y=35),
            make_fragment("d", x=0, y=36),
        ])

        assert result.texts == ["a", "b c", "d"]

    def test_negative_threshold_rejected(self):
        with pytest.raises(GroupingConfigurationError):
            LineGroupingStage(line_threshold=-1)


class TestLineGroupingProperties:
    """Свойства: разбиение и независимость от порядка входа."""

    FRAGMENTS = [
        make_fragment("Pollo", x=10, y=10),
        make_fragment("asado", x=70, y=12),
        make_fragment("$12.00", x=200, y=11),
        make_fragment("Sopa", x=10, y=60),
    ]

    def test_every_fragment_in_exactly_one_line(self, stage):
        result = stage.process(self.FRAGMENTS)

        grouped = [f for line in result.lines for f in line.fragments]
        assert len(grouped) == len(self.FRAGMENTS)
        assert set(grouped) == set(self.FRAGMENTS)

    def test_output_invariant_under_permutation(self, stage):
        expected = stage.process(self.FRAGMENTS).texts

        for permutation in itertools.permutations(self.FRAGMENTS):
            assert stage.process(list(permutation)).texts == expected

    def test_identical_boxes_ordered_by_text(self, stage):
        """Повторные срабатывания OCR на одном боксе не зависят от порядка входа."""
        first = make_fragment("Pollo", x=10, y=10, confidence=0.8)
        second = make_fragment("Po11o", x=10, y=10, confidence=0.8)
        third = make_fragment("Pollo", x=10, y=10, confidence=0.6)

        forward = stage.process([first, second, third]).lines[0].fragments
        backward = stage.process([third, second, first]).lines[0].fragments

        assert forward == backward
        assert forward == [second, third, first]

    def test_lines_ordered_top_to_bottom(self, stage):
        result = stage.process(self.FRAGMENTS)

        anchors = [line.anchor_y for line in result.lines]
        assert anchors == sorted(anchors)
