"""
Загрузчик профиля группировки из YAML файла.

Пример (config/grouping.yaml):

    grouping:
      line_threshold: 15
      min_confidence: 0.7        # null = фильтр выключен
    normalization:
      provider: google_vision    # null = автоопределение
      default_confidence: 0.9
    layout:
      proximity_max_distance: 50
      column_span_threshold: 500

Отсутствующие ключи берутся из config/settings.py.
Использует Pydantic для валидации структуры профиля.
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from config import settings
from .domain.exceptions import GroupingConfigurationError, GroupingFileNotFoundError


DEFAULT_PROFILE_PATH = settings.PROJECT_ROOT / "config" / "grouping.yaml"


class GroupingConfig(BaseModel):
    """Валидированный профиль группировки."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    line_threshold: float = Field(settings.LINE_THRESHOLD, ge=0, description="Порог Y для строки (px)")
    min_confidence: Optional[float] = Field(
        settings.MIN_CONFIDENCE if settings.ENABLE_CONFIDENCE_FILTER else None,
        ge=0,
        le=1,
        description="Порог confidence (None = фильтр выключен)",
    )
    provider: Optional[str] = Field(settings.DEFAULT_PROVIDER, description="Провайдер OCR (None = авто)")
    default_confidence: float = Field(
        settings.DEFAULT_FRAGMENT_CONFIDENCE, ge=0, le=1, description="Confidence по умолчанию"
    )
    proximity_max_distance: float = Field(
        settings.PROXIMITY_MAX_DISTANCE, ge=0, description="Радиус кластеризации (px)"
    )
    column_span_threshold: float = Field(
        settings.COLUMN_SPAN_THRESHOLD, ge=0, description="Размах для двух колонок (px)"
    )


class GroupingConfigLoader:
    """Загружает GroupingConfig из YAML файла с валидацией через Pydantic."""

    SECTIONS = ("grouping", "normalization", "layout")

    def __init__(self, profile_path: Optional[Union[str, Path]] = None):
        """
        Args:
            profile_path: Путь к YAML профилю (по умолчанию config/grouping.yaml)
        """
        self.profile_path = Path(profile_path) if profile_path else DEFAULT_PROFILE_PATH

    def load(self, required: bool = False) -> GroupingConfig:
        """
        Загружает профиль.

        Args:
            required: Ошибка, если файла нет (иначе - значения из settings)

        Returns:
            GroupingConfig: Валидированный профиль

        Raises:
            GroupingFileNotFoundError: required=True и файла нет
            GroupingConfigurationError: YAML или значения невалидны
        """
        if not self.profile_path.exists():
            if required:
                raise GroupingFileNotFoundError(
                    message=f"Профиль группировки не найден: {self.profile_path}",
                    component="GroupingConfigLoader",
                )
            logger.debug(f"[GroupingConfigLoader] Профиль {self.profile_path} не найден, используем settings")
            return GroupingConfig()

        logger.debug(f"[GroupingConfigLoader] Загрузка профиля {self.profile_path}")

        try:
            with open(self.profile_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise GroupingConfigurationError(
                message=f"Некорректный YAML: {self.profile_path}",
                component="GroupingConfigLoader",
                original_error=e,
            )

        return self.parse(data)

    def parse(self, data: dict) -> GroupingConfig:
        """
        Валидирует словарь профиля (структура как в YAML).

        Raises:
            GroupingConfigurationError: неизвестная секция или невалидные значения
        """
        if not isinstance(data, dict):
            raise GroupingConfigurationError(
                message="Профиль должен быть YAML-словарём",
                component="GroupingConfigLoader",
            )

        unknown = set(data) - set(self.SECTIONS)
        if unknown:
            raise GroupingConfigurationError(
                message=f"Неизвестные секции профиля: {sorted(unknown)}. Доступные: {list(self.SECTIONS)}",
                component="GroupingConfigLoader",
            )

        flat = {}
        for section in self.SECTIONS:
            values = data.get(section) or {}
            if not isinstance(values, dict):
                raise GroupingConfigurationError(
                    message=f"Секция '{section}' должна быть словарём",
                    component="GroupingConfigLoader",
                )
            flat.update(values)

        try:
            return GroupingConfig(**flat)
        except ValidationError as e:
            logger.error(f"[GroupingConfigLoader] Ошибки Pydantic:\n{e}")
            raise GroupingConfigurationError(
                message=f"Профиль группировки невалиден: {self.profile_path}",
                component="GroupingConfigLoader",
                original_error=e,
            ) from e
