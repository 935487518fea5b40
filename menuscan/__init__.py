"""Menuscan - восстановление позиций меню из сырых результатов OCR."""

from menuscan.grouping import GroupingPipeline, PipelineResult

__all__ = ["GroupingPipeline", "PipelineResult"]
