"""
Proximity Clusterer - группировка фрагментов по близости.

Вспомогательная эвристика для layout-aware потребителей.
В основном пайплайне (Stage 3-6) не используется.

Алгоритм (один жадный проход):
1. Берём первый непосещённый фрагмент как seed нового кластера
2. Добавляем все непосещённые фрагменты, центр которых не дальше
   max_distance от центра SEED (не от уже добавленных членов)
3. Повторяем для следующего непосещённого фрагмента

Ограничение: это НЕ транзитивное замыкание (не connected components).
Цепочка A-B-C, где B близко к A, а C близко только к B, даст
кластеры [A, B] и [C]. Результат зависит от порядка входа.
"""

import math
from typing import List

from loguru import logger

from config.settings import PROXIMITY_MAX_DISTANCE
from contracts.fragment_dto import BoundingBox, TextFragment
from ..domain.exceptions import GroupingConfigurationError


def center_distance(box1: BoundingBox, box2: BoundingBox) -> float:
    """Евклидово расстояние между центрами боксов."""
    x1, y1 = box1.center
    x2, y2 = box2.center
    return math.hypot(x2 - x1, y2 - y1)


class ProximityClusterer:
    """
    Жадная кластеризация фрагментов по расстоянию до seed.
    """

    def __init__(self, max_distance: float = PROXIMITY_MAX_DISTANCE):
        """
        Args:
            max_distance: Максимальное расстояние между центрами (px)
        """
        if max_distance < 0:
            raise GroupingConfigurationError(
                message=f"max_distance не может быть отрицательным: {max_distance}",
                component="ProximityClusterer",
            )
        self.max_distance = max_distance

    def cluster(self, fragments: List[TextFragment]) -> List[List[TextFragment]]:
        """
        Разбивает фрагменты на кластеры.

        Args:
            fragments: Фрагменты (порядок влияет на результат)

        Returns:
            Список кластеров; каждый фрагмент ровно в одном кластере
        """
        clusters: List[List[TextFragment]] = []
        visited = [False] * len(fragments)

        for i, seed in enumerate(fragments):
            if visited[i]:
                continue

            visited[i] = True
            cluster = [seed]

            for j in range(i + 1, len(fragments)):
                if visited[j]:
                    continue
                if center_distance(seed.bounding_box, fragments[j].bounding_box) <= self.max_distance:
                    cluster.append(fragments[j])
                    visited[j] = True

            clusters.append(cluster)

        logger.debug(
            f"[ProximityClusterer] {len(fragments)} фрагментов -> {len(clusters)} кластеров "
            f"(max_distance={self.max_distance})"
        )
        return clusters
