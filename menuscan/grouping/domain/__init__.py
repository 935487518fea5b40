"""Домен Grouping: интерфейсы и исключения."""

from .exceptions import (
    GroupingError,
    MalformedInputError,
    ProviderResponseError,
    EmptyGroupError,
    GroupingConfigurationError,
    GroupingFileSystemError,
    GroupingFileNotFoundError,
    GroupingFileWriteError,
    GroupingFileReadError,
    ContractValidationError,
)

__all__ = [
    "GroupingError",
    "MalformedInputError",
    "ProviderResponseError",
    "EmptyGroupError",
    "GroupingConfigurationError",
    "GroupingFileSystemError",
    "GroupingFileNotFoundError",
    "GroupingFileWriteError",
    "GroupingFileReadError",
    "ContractValidationError",
]
