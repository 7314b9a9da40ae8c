"""
Amounts — арифметика сумм в наименьших единицах (MIST)

Единственный допустимый способ преобразований между:
- raw amount (MIST, int, произвольная точность)
- строковым представлением из RPC ("-1000", "960")
- отображением в SUI (Decimal, только для вывода)

ЗАПРЕЩЕНО использовать float на любом шаге. Все суммы хранятся как int
до финального форматирования.
"""

from decimal import Decimal, localcontext
from typing import Any, Final, Optional


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# 1 SUI = 10^9 MIST
SUI_DECIMALS: Final[int] = 9
MIST_PER_SUI: Final[int] = 10**SUI_DECIMALS

# Нативный coin type
SUI_COIN_TYPE: Final[str] = "0x2::sui::SUI"


# =============================================================================
# ПАРСИНГ
# =============================================================================


def parse_amount(value: Any) -> Optional[int]:
    """
    Парсинг целой суммы из RPC.

    RPC отдаёт суммы как десятичные строки (иногда со знаком).
    bool и float не принимаются: float уже мог потерять точность.

    Args:
        value: значение из JSON

    Returns:
        int или None если значение не является целым числом
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    digits = text[1:] if text[:1] in ("-", "+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    return int(text)


def gas_fee(computation_cost: int, storage_cost: int, storage_rebate: int) -> int:
    """
    Итоговая комиссия транзакции.

    gas_fee = computationCost + storageCost - storageRebate

    Может быть отрицательной, если rebate превышает затраты.
    """
    return computation_cost + storage_cost - storage_rebate


# =============================================================================
# ОТОБРАЖЕНИЕ
# =============================================================================


def _exact_precision(value: Decimal) -> int:
    """Precision контекста, достаточная для всех цифр value."""
    return max(28, len(value.as_tuple().digits) + 2)


def mist_to_sui(amount_mist: int | Decimal) -> Decimal:
    """
    Конверсия MIST → SUI для отображения.

    Сдвиг порядка Decimal, без деления и без float. Precision контекста
    расширяется до длины числа: scaleb иначе округляет до 28 цифр.
    """
    value = Decimal(amount_mist)
    with localcontext() as ctx:
        ctx.prec = _exact_precision(value)
        return value.scaleb(-SUI_DECIMALS)


def format_sui(amount_mist: int | Decimal) -> str:
    """Человекочитаемое значение в SUI без экспоненты и хвостовых нулей."""
    text = format(mist_to_sui(amount_mist), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def exact_half(amount: int) -> Decimal:
    """
    Ровно половина суммы без округления.

    Для нечётного amount результат имеет дробную часть .5, поэтому
    precision контекста увеличивается до длины числа.
    """
    value = Decimal(amount)
    with localcontext() as ctx:
        ctx.prec = _exact_precision(value)
        return value / Decimal(2)
