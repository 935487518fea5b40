"""
Менеджер файлов для домена Grouping.

Core группировки не делает I/O: этот модуль используется только
dev-скриптами (scripts/group_menu.py) для чтения сохранённых ответов
провайдера и записи результатов.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

from ..domain.exceptions import GroupingFileNotFoundError, GroupingFileReadError, GroupingFileWriteError


class GroupingFileManager:
    """Чтение сохранённых ответов провайдера и запись grouped_items.json."""

    RESULT_FILE_NAME = "grouped_items.json"

    def save_json(self, data: Dict[str, Any], file_path: Path) -> Path:
        """
        Пишет data как JSON (UTF-8, отступ 2), создавая недостающие директории.

        Raises:
            GroupingFileWriteError: data не сериализуется или запись не удалась
        """
        try:
            content = json.dumps(data, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise GroupingFileWriteError(
                message=f"Данные для {file_path.name} не сериализуются в JSON",
                component="GroupingFileManager",
                original_error=e,
            )

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise GroupingFileWriteError(
                message=f"Не удалось записать {file_path}",
                component="GroupingFileManager",
                original_error=e,
            )

        logger.debug(f"[GroupingFileManager] Записан {file_path}")
        return file_path

    def load_json(self, file_path: Path) -> Dict[str, Any]:
        """
        Читает сохранённый ответ провайдера (или результат группировки).

        Raises:
            GroupingFileNotFoundError: файла нет
            GroupingFileReadError: файл не читается или это не JSON
        """
        if not file_path.is_file():
            raise GroupingFileNotFoundError(
                message=f"Файл не найден: {file_path}",
                component="GroupingFileManager",
            )

        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise GroupingFileReadError(
                message=f"Не удалось прочитать JSON: {file_path}",
                component="GroupingFileManager",
                original_error=e,
            )

        logger.debug(f"[GroupingFileManager] Прочитан {file_path}")
        return data

    def save_grouping_result(self, result_data: Dict[str, Any], output_dir: Path) -> Path:
        """
        Сохраняет результат группировки рядом с исходным ответом провайдера.

        Args:
            result_data: Сериализованный результат (ScanSummary)
            output_dir: Директория для сохранения

        Returns:
            Путь к сохраненному файлу
        """
        return self.save_json(result_data, output_dir / self.RESULT_FILE_NAME)

    def get_ocr_files(self, directory_path: Path) -> List[Path]:
        """
        Получает список сохранённых ответов провайдера в директории (рекурсивно).

        Собственные результаты (grouped_items.json) пропускаются.

        Args:
            directory_path: Путь к директории

        Returns:
            Отсортированный список путей к .json файлам
        """
        if not directory_path.exists():
            return []

        return sorted(
            path for path in directory_path.rglob('*.json')
            if path.name != self.RESULT_FILE_NAME
        )
