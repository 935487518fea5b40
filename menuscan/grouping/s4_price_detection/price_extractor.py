"""
Price Extractor - поиск цен в тексте позиции меню.

ЦКП: Один паттерн цены для детекции границ (Stage 4) и для
извлечения цены в собранной позиции (Stage 6).

SRP: Только работа с ценами. Конвертации валют нет.
"""

import re
from typing import Optional

from loguru import logger


class PriceExtractor:
    """
    Поиск цен вида "$12.00", "€ 9", "12,50€", "450₹".

    Символ валюты стоит непосредственно перед суммой или после неё
    (допускается пробел), дробная часть - ровно 2 цифры через "." или ",".
    """

    CURRENCY_SYMBOLS = "$€£¥₹"

    # Группы: (сумма при символе слева) | (сумма при символе справа)
    PRICE_PATTERN = re.compile(
        r"[$€£¥₹]\s*(\d+(?:[.,]\d{2})?)|(\d+(?:[.,]\d{2})?)\s*[$€£¥₹]"
    )

    def has_price(self, text: str) -> bool:
        """Есть ли в тексте хотя бы одна цена."""
        return self.PRICE_PATTERN.search(text) is not None

    def extract(self, text: str) -> Optional[str]:
        """
        Первая цена в тексте, как она написана (без пробелов по краям).

        Args:
            text: Текст позиции (может быть многострочным)

        Returns:
            Строка цены (например, "$12.00") или None
        """
        match = self.PRICE_PATTERN.search(text)
        if not match:
            return None
        return match.group(0).strip()

    def extract_amount(self, text: str) -> Optional[float]:
        """
        Числовое значение первой цены ("12,50€" -> 12.5).

        Только для информации: валюта не учитывается.
        """
        match = self.PRICE_PATTERN.search(text)
        if not match:
            return None

        amount = match.group(1) or match.group(2)
        try:
            return float(amount.replace(",", "."))
        except ValueError:
            logger.debug(f"[PriceExtractor] Не удалось разобрать сумму: {amount!r}")
            return None


_default_extractor = PriceExtractor()


def extract_price(text: str) -> Optional[str]:
    """Первая цена в тексте (см. PriceExtractor.extract)."""
    return _default_extractor.extract(text)
