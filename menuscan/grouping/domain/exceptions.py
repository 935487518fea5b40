"""
Исключения для домена Grouping.

Специфичные для группировки OCR-фрагментов в позиции меню ошибки.
Ни одна из них не ретраится внутри core - всё уходит вызывающему коду.
"""

from typing import Any, Dict, List, Optional, Union


class GroupingError(Exception):
    """Базовое исключение для ошибок домена Grouping."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Grouping Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class MalformedInputError(GroupingError):
    """Payload провайдера не содержит обязательных полей (текст, bounding polygon)."""
    pass


class ProviderResponseError(GroupingError):
    """Провайдер OCR вернул ошибку в самом payload."""
    pass


class EmptyGroupError(GroupingError):
    """Пустая группа строк на входе сборщика (ошибка программы, не пользователя)."""
    pass


class GroupingConfigurationError(GroupingError):
    """Ошибка конфигурации домена Grouping."""
    pass


class GroupingFileSystemError(GroupingError):
    """Ошибка файловой системы в домене Grouping."""
    pass


class GroupingFileNotFoundError(GroupingFileSystemError):
    """Файл не найден в домене Grouping."""
    pass


class GroupingFileWriteError(GroupingFileSystemError):
    """Ошибка записи файла в домене Grouping."""
    pass


class GroupingFileReadError(GroupingFileSystemError):
    """Файл существует, но не читается или содержит невалидный JSON."""
    pass


class ContractValidationError(GroupingError):
    """Нарушение выходного контракта (оборачивает Pydantic ValidationError)."""

    def __init__(self, stage_name: str, contract_name: str, errors: Union[List[Dict[str, Any]], List[Any]]) -> None:
        self.stage_name = stage_name
        self.contract_name = contract_name
        self.errors = errors

        error_messages = []
        for err in errors:
            if isinstance(err, dict):
                loc = err.get('loc', [])[0] if err.get('loc') else 'unknown'
                err_type = err.get('type', 'unknown')
                msg = err.get('msg', 'unknown error')
                error_messages.append(f"  {loc} ({err_type}): {msg}")
            else:
                error_messages.append(f"  {str(err)}")

        super().__init__(
            message=f"Contract violation ({contract_name}):\n" + "\n".join(error_messages),
            component=stage_name,
        )
