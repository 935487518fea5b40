#!/usr/bin/env python3
"""
Dev-скрипт: группировка сохранённых ответов OCR в позиции меню.

Использование:
    # Обработать все .json из data/input/
    python scripts/group_menu.py

    # Обработать конкретный ответ провайдера
    python scripts/group_menu.py path/to/vision_response.json

    # Явно указать провайдера и включить Confidence Filter
    python scripts/group_menu.py path/to/dir --provider google_vision --min-confidence 0.7

Результат пишется в grouped_items.json рядом с исходным файлом.
"""

import sys
import argparse
from pathlib import Path
from typing import List

# Добавляем корень проекта в путь
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import INPUT_DIR
from menuscan.grouping import GroupingConfigLoader, GroupingPipeline
from menuscan.grouping.domain.exceptions import GroupingError
from menuscan.grouping.infrastructure import GroupingFileManager


def group_file(pipeline: GroupingPipeline, file_manager: GroupingFileManager, ocr_file: Path) -> bool:
    """
    Группирует один сохранённый ответ провайдера.

    Args:
        pipeline: Настроенный пайплайн
        file_manager: Менеджер файлов
        ocr_file: Путь к JSON ответу провайдера

    Returns:
        True если успешно, False если ошибка
    """
    try:
        payload = file_manager.load_json(ocr_file)
        result = pipeline.process(payload)

        summary = result.to_summary().model_dump(mode="json")
        if result.structure is not None:
            summary["structure"] = result.structure.to_dict()
        if result.clusters is not None:
            summary["clusters"] = [[f.text for f in cluster] for cluster in result.clusters]

        result_file = file_manager.save_grouping_result(summary, ocr_file.parent)

        print(f"  [INFO]  Провайдер: {result.provider}, позиций: {len(result.items)}")
        for item in result.items:
            first_line = item.text.split("\n")[0]
            print(f"          #{item.id}: {first_line[:50]:<50} {item.price or '-'}")
        print(f"  [SAVED] {result_file}")
        return True

    except GroupingError as e:
        print(f"  [ERROR] {ocr_file.name}: {e}")
        return False


def main():
    """Главная функция запуска группировки."""

    print("\n" + "=" * 60)
    print("  MENUSCAN - группировка OCR в позиции меню")
    print("=" * 60)

    parser = argparse.ArgumentParser(description="Menuscan grouping")
    parser.add_argument("path", nargs="?", help="JSON ответ провайдера или директория (опционально)")
    parser.add_argument("--provider", help="google_vision | google_vision_document | fragments")
    parser.add_argument("--config", help="Путь к YAML профилю группировки")
    parser.add_argument("--min-confidence", type=float, help="Включить Confidence Filter с порогом")
    parser.add_argument("--layout", action="store_true", help="Добавить анализ колонок и кластеры близости")
    args = parser.parse_args()

    input_path = Path(args.path) if args.path else INPUT_DIR
    file_manager = GroupingFileManager()

    if input_path.is_file():
        ocr_files: List[Path] = [input_path]
    elif input_path.is_dir():
        ocr_files = file_manager.get_ocr_files(input_path)
    else:
        print(f"[ERROR] Неверный путь: {input_path}")
        sys.exit(1)

    if not ocr_files:
        print(f"[WARNING] В {input_path} нет JSON файлов")
        sys.exit(0)

    try:
        config = GroupingConfigLoader(args.config).load(required=bool(args.config))
        overrides = {}
        if args.provider:
            overrides["provider"] = args.provider
        if args.min_confidence is not None:
            overrides["min_confidence"] = args.min_confidence
        if overrides:
            config = config.model_copy(update=overrides)
        pipeline = GroupingPipeline.from_config(config, analyze_layout=args.layout)
    except GroupingError as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    print(f"\n[PROCESSING] Обработка {len(ocr_files)} файлов")

    success_count = 0
    for i, ocr_file in enumerate(ocr_files, 1):
        print(f"\n[{i}/{len(ocr_files)}] {ocr_file.name}")
        if group_file(pipeline, file_manager, ocr_file):
            success_count += 1

    print("\n" + "=" * 60)
    print(f"  ИТОГИ: {success_count}/{len(ocr_files)} успешно обработано")

    if success_count != len(ocr_files):
        print(f"  [WARNING] {len(ocr_files) - success_count} файлов не обработано")
        sys.exit(1)


if __name__ == "__main__":
    main()
