"""
Домен Grouping: восстановление позиций меню из сырых результатов OCR.

Архитектура: 6-этапный пайплайн
- Stage 1: Normalization (payload провайдера -> фрагменты)
- Stage 2: Confidence Filter (опционально)
- Stage 3: Line Grouping (фрагменты -> строки)
- Stage 4: Price Detection (строки с ценами)
- Stage 5: Segmentation (строки -> группы)
- Stage 6: Assembly (группы -> GroupedMenuItem)

Вспомогательно (вне пайплайна): ProximityClusterer, StructureDetector.

Вход: payload провайдера OCR (JSON-структура)
Выход: contracts.GroupedMenuItem[]
"""

from menuscan.grouping.pipeline import GroupingPipeline, PipelineResult
from menuscan.grouping.config_loader import GroupingConfig, GroupingConfigLoader

# Stage exports
from menuscan.grouping.s1_normalization import NormalizationStage, NormalizationResult, ProviderStrategyFactory
from menuscan.grouping.s2_confidence_filter import ConfidenceFilterStage, ConfidenceFilterResult, filter_fragments
from menuscan.grouping.s3_line_grouping import LineGroupingStage, LineGroupingResult, Line
from menuscan.grouping.s4_price_detection import PriceDetectionStage, PriceDetectionResult, PriceExtractor, extract_price
from menuscan.grouping.s5_segmentation import ItemSegmentationStage, SegmentationResult, MenuItemGroup
from menuscan.grouping.s6_assembly import ItemAssemblyStage, AssemblyResult

# Layout
from menuscan.grouping.layout import ProximityClusterer, StructureDetector, MenuStructure

__all__ = [
    # Pipeline
    "GroupingPipeline",
    "PipelineResult",
    "GroupingConfig",
    "GroupingConfigLoader",
    # Stages
    "NormalizationStage",
    "NormalizationResult",
    "ProviderStrategyFactory",
    "ConfidenceFilterStage",
    "ConfidenceFilterResult",
    "filter_fragments",
    "LineGroupingStage",
    "LineGroupingResult",
    "Line",
    "PriceDetectionStage",
    "PriceDetectionResult",
    "PriceExtractor",
    "extract_price",
    "ItemSegmentationStage",
    "SegmentationResult",
    "MenuItemGroup",
    "ItemAssemblyStage",
    "AssemblyResult",
    # Layout
    "ProximityClusterer",
    "StructureDetector",
    "MenuStructure",
]
