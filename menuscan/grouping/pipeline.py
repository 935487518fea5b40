"""
Grouping Pipeline - оркестратор этапов группировки.

Координирует выполнение этапов в строгом порядке:
1. Normalization -> 2. Confidence Filter (опционально) -> 3. Line Grouping ->
4. Price Detection -> 5. Segmentation -> 6. Assembly

Возвращает PipelineResult с GroupedMenuItem[] и промежуточными данными.

Пайплайн синхронный и без общего изменяемого состояния: независимые
вызовы (по одному на снимок) можно выполнять параллельно.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger

from config.settings import ENABLE_CONFIDENCE_FILTER
from contracts.fragment_dto import TextFragment
from contracts.menu_item_dto import GroupedMenuItem, ScanSummary
from .config_loader import GroupingConfig
from .domain.interfaces import IGroupingPipeline
from .layout import MenuStructure, ProximityClusterer, StructureDetector
from .s1_normalization import NormalizationResult, NormalizationStage, ProviderStrategyFactory
from .s2_confidence_filter import ConfidenceFilterResult, ConfidenceFilterStage
from .s3_line_grouping import LineGroupingResult, LineGroupingStage
from .s4_price_detection import PriceDetectionResult, PriceDetectionStage
from .s5_segmentation import ItemSegmentationStage, SegmentationResult
from .s6_assembly import AssemblyResult, ItemAssemblyStage


@dataclass
class PipelineResult:
    """
    Полный результат пайплайна со всеми промежуточными данными.

    Используется для отладки и анализа.
    """
    # Финальный результат
    items: List[GroupedMenuItem] = field(default_factory=list)

    # Промежуточные результаты этапов
    normalization: Optional[NormalizationResult] = None
    confidence_filter: Optional[ConfidenceFilterResult] = None
    layout: Optional[LineGroupingResult] = None
    prices: Optional[PriceDetectionResult] = None
    segmentation: Optional[SegmentationResult] = None
    assembly: Optional[AssemblyResult] = None

    # Вспомогательный анализ (analyze_layout=True)
    structure: Optional[MenuStructure] = None
    clusters: Optional[List[List[TextFragment]]] = None

    # Метрики
    processing_time_ms: float = 0.0
    stages_completed: int = 0

    @property
    def provider(self) -> Optional[str]:
        return self.normalization.provider if self.normalization else None

    def to_summary(self) -> ScanSummary:
        """Конверт для слоя сохранения (позиции + время + количество)."""
        return ScanSummary(
            items=self.items,
            item_count=len(self.items),
            provider=self.provider,
        )

    def to_dict(self) -> dict:
        return {
            "items": [item.model_dump(mode="json") for item in self.items],
            "normalization": self.normalization.to_dict() if self.normalization else None,
            "confidence_filter": self.confidence_filter.to_dict() if self.confidence_filter else None,
            "layout": self.layout.to_dict() if self.layout else None,
            "prices": self.prices.to_dict() if self.prices else None,
            "segmentation": self.segmentation.to_dict() if self.segmentation else None,
            "assembly": self.assembly.to_dict() if self.assembly else None,
            "structure": self.structure.to_dict() if self.structure else None,
            "clusters": (
                [[f.text for f in cluster] for cluster in self.clusters]
                if self.clusters is not None else None
            ),
            "processing_time_ms": self.processing_time_ms,
            "stages_completed": self.stages_completed,
        }


class GroupingPipeline(IGroupingPipeline):
    """
    Пайплайн группировки OCR-фрагментов в позиции меню.

    Координирует этапы в строгом порядке:
    1. Normalization - payload провайдера -> фрагменты
    2. Confidence Filter - отсев неуверенных фрагментов (если включён)
    3. Line Grouping - фрагменты -> строки
    4. Price Detection - строки с ценами
    5. Segmentation - строки -> группы
    6. Assembly - группы -> GroupedMenuItem

    ЦКП: Упорядоченный список GroupedMenuItem.
    """

    def __init__(
        self,
        normalization_stage: Optional[NormalizationStage] = None,
        confidence_filter_stage: Optional[ConfidenceFilterStage] = None,
        line_grouping_stage: Optional[LineGroupingStage] = None,
        price_detection_stage: Optional[PriceDetectionStage] = None,
        segmentation_stage: Optional[ItemSegmentationStage] = None,
        assembly_stage: Optional[ItemAssemblyStage] = None,
        structure_detector: Optional[StructureDetector] = None,
        proximity_clusterer: Optional[ProximityClusterer] = None,
        provider: Optional[str] = None,
        analyze_layout: bool = False,
    ):
        """
        Инициализация пайплайна.

        Args:
            Все этапы опциональны - по умолчанию создаются стандартные.
            confidence_filter_stage: None = фильтр выключен
                (если не включён через MENUSCAN_ENABLE_CONFIDENCE_FILTER)
            provider: Провайдер OCR по умолчанию (None = автоопределение)
            analyze_layout: Дополнительно запускать StructureDetector и ProximityClusterer
        """
        self.normalization_stage = normalization_stage or NormalizationStage()
        self.confidence_filter_stage = confidence_filter_stage
        if self.confidence_filter_stage is None and ENABLE_CONFIDENCE_FILTER:
            self.confidence_filter_stage = ConfidenceFilterStage()
        self.line_grouping_stage = line_grouping_stage or LineGroupingStage()
        self.price_detection_stage = price_detection_stage or PriceDetectionStage()
        self.segmentation_stage = segmentation_stage or ItemSegmentationStage()
        self.assembly_stage = assembly_stage or ItemAssemblyStage()
        self.structure_detector = structure_detector or StructureDetector()
        self.proximity_clusterer = proximity_clusterer or ProximityClusterer()
        self.provider = provider
        self.analyze_layout = analyze_layout

        logger.info(
            f"[GroupingPipeline] Инициализирован "
            f"(confidence_filter={'on' if self.confidence_filter_stage else 'off'})"
        )

    @classmethod
    def from_config(cls, config: GroupingConfig, analyze_layout: bool = False) -> "GroupingPipeline":
        """
        Создаёт пайплайн из валидированного профиля.

        Args:
            config: Профиль (см. GroupingConfigLoader)
            analyze_layout: Дополнительно запускать layout-эвристики
        """
        return cls(
            normalization_stage=NormalizationStage(
                ProviderStrategyFactory(default_confidence=config.default_confidence)
            ),
            confidence_filter_stage=(
                ConfidenceFilterStage(config.min_confidence)
                if config.min_confidence is not None else None
            ),
            line_grouping_stage=LineGroupingStage(config.line_threshold),
            structure_detector=StructureDetector(config.column_span_threshold),
            proximity_clusterer=ProximityClusterer(config.proximity_max_distance),
            provider=config.provider,
            analyze_layout=analyze_layout,
        )

    def process(self, payload: Dict[str, Any], provider: Optional[str] = None) -> PipelineResult:
        """
        Обрабатывает ответ провайдера через все этапы.

        Args:
            payload: Ответ провайдера OCR (JSON-структура)
            provider: Идентификатор провайдера (None = из конструктора / автоопределение)

        Returns:
            PipelineResult: Полный результат с позициями и промежуточными данными

        Raises:
            MalformedInputError: payload не содержит обязательных полей
            ProviderResponseError: провайдер вернул ошибку
        """
        start_time = time.time()
        stages_completed = 0

        # Stage 1: Normalization
        logger.debug("[GroupingPipeline] Stage 1/6: Normalization")
        normalization = self.normalization_stage.process(payload, provider or self.provider)
        page = normalization.page
        stages_completed += 1

        # Stage 2: Confidence Filter
        confidence_filter = None
        if self.confidence_filter_stage is not None:
            logger.debug("[GroupingPipeline] Stage 2/6: Confidence Filter")
            confidence_filter = self.confidence_filter_stage.process(page)
            page = confidence_filter.page
            stages_completed += 1

        result = self._group(page.fragments)
        result.normalization = normalization
        result.confidence_filter = confidence_filter
        result.stages_completed += stages_completed

        if self.analyze_layout:
            result.structure = self.structure_detector.detect(page.fragments)
            result.clusters = self.proximity_clusterer.cluster(page.fragments)

        result.processing_time_ms = (time.time() - start_time) * 1000

        logger.info(
            f"[GroupingPipeline] Завершено за {result.processing_time_ms:.1f}ms: "
            f"{len(result.items)} позиций из {len(page.fragments)} фрагментов"
        )
        return result

    def group_fragments(self, fragments: List[TextFragment]) -> List[GroupedMenuItem]:
        """
        Группирует уже нормализованные фрагменты (Stage 3-6).

        Args:
            fragments: Провайдер-независимые фрагменты

        Returns:
            Упорядоченный список позиций меню (пустой для пустого входа)
        """
        return self._group(fragments).items

    def _group(self, fragments: List[TextFragment]) -> PipelineResult:
        """Stage 3-6 над списком фрагментов."""
        # Stage 3: Line Grouping
        logger.debug("[GroupingPipeline] Stage 3/6: Line Grouping")
        layout = self.line_grouping_stage.process(fragments)

        # Stage 4: Price Detection
        logger.debug("[GroupingPipeline] Stage 4/6: Price Detection")
        prices = self.price_detection_stage.process(layout)

        # Stage 5: Segmentation
        logger.debug("[GroupingPipeline] Stage 5/6: Segmentation")
        segmentation = self.segmentation_stage.process(layout, prices)

        # Stage 6: Assembly
        logger.debug("[GroupingPipeline] Stage 6/6: Assembly")
        assembly = self.assembly_stage.process(segmentation)

        return PipelineResult(
            items=assembly.items,
            layout=layout,
            prices=prices,
            segmentation=segmentation,
            assembly=assembly,
            stages_completed=4,
        )
