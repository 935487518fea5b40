"""Инфраструктура домена Grouping (файлы - только для dev-скриптов)."""

from .file_manager import GroupingFileManager

__all__ = ["GroupingFileManager"]
