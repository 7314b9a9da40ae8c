"""
Core math modules

Целочисленная арифметика сумм в MIST и форматирование для отображения.
"""

from src.core.math.amounts import (
    MIST_PER_SUI,
    SUI_COIN_TYPE,
    SUI_DECIMALS,
    exact_half,
    format_sui,
    gas_fee,
    mist_to_sui,
    parse_amount,
)

__all__ = [
    "SUI_DECIMALS",
    "MIST_PER_SUI",
    "SUI_COIN_TYPE",
    "parse_amount",
    "gas_fee",
    "mist_to_sui",
    "format_sui",
    "exact_half",
]
