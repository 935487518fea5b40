"""
Настройки проекта Menuscan.

Все пороги можно переопределить через переменные окружения
(MENUSCAN_LINE_THRESHOLD и т.д.) или через YAML-профиль
(см. menuscan/grouping/config_loader.py).
"""

import os
from pathlib import Path

# =============================================================================
# ПУТИ ПРОЕКТА
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
INPUT_DIR = DATA_DIR / "input"
OUTPUT_DIR = DATA_DIR / "output"

# =============================================================================
# НАСТРОЙКИ НОРМАЛИЗАЦИИ (S1)
# =============================================================================
# Провайдер OCR по умолчанию (None = автоопределение по структуре payload)
DEFAULT_PROVIDER = os.getenv("MENUSCAN_PROVIDER") or None

# Confidence для фрагментов, у которых провайдер её не прислал
# (Cloud Vision TEXT_DETECTION не всегда возвращает confidence)
DEFAULT_FRAGMENT_CONFIDENCE = float(os.getenv("MENUSCAN_DEFAULT_CONFIDENCE", "0.9"))

# =============================================================================
# НАСТРОЙКИ CONFIDENCE FILTER (S2)
# =============================================================================
# Минимальная уверенность OCR для фрагмента
MIN_CONFIDENCE = float(os.getenv("MENUSCAN_MIN_CONFIDENCE", "0.7"))

# Включать ли фильтр в пайплайне по умолчанию
ENABLE_CONFIDENCE_FILTER = os.getenv("MENUSCAN_ENABLE_CONFIDENCE_FILTER", "0") == "1"

# =============================================================================
# НАСТРОЙКИ ГРУППИРОВКИ (S3-S6)
# =============================================================================
# Максимальная разница Y (px) между фрагментом и якорем строки
LINE_THRESHOLD = int(os.getenv("MENUSCAN_LINE_THRESHOLD", "15"))

# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ ЭВРИСТИКИ LAYOUT
# =============================================================================
# Максимальное расстояние между центрами боксов для кластеризации (px)
PROXIMITY_MAX_DISTANCE = float(os.getenv("MENUSCAN_PROXIMITY_MAX_DISTANCE", "50"))

# Горизонтальный размах (px), после которого меню считается двухколоночным
COLUMN_SPAN_THRESHOLD = int(os.getenv("MENUSCAN_COLUMN_SPAN_THRESHOLD", "500"))


# =============================================================================
# ПРОВЕРКА КОНФИГУРАЦИИ
# =============================================================================
def validate_config():
    """Проверяет корректность конфигурации."""
    errors = []

    if LINE_THRESHOLD < 0:
        errors.append(f"LINE_THRESHOLD не может быть отрицательным: {LINE_THRESHOLD}")

    for name, value in (
        ("MIN_CONFIDENCE", MIN_CONFIDENCE),
        ("DEFAULT_FRAGMENT_CONFIDENCE", DEFAULT_FRAGMENT_CONFIDENCE),
    ):
        if not 0.0 <= value <= 1.0:
            errors.append(f"{name} должен быть в диапазоне [0, 1], получено: {value}")

    if PROXIMITY_MAX_DISTANCE < 0:
        errors.append(f"PROXIMITY_MAX_DISTANCE не может быть отрицательным: {PROXIMITY_MAX_DISTANCE}")

    if COLUMN_SPAN_THRESHOLD < 0:
        errors.append(f"COLUMN_SPAN_THRESHOLD не может быть отрицательным: {COLUMN_SPAN_THRESHOLD}")

    if errors:
        raise ValueError("\n".join(errors))

    return True
