from decimal import ROUND_HALF_UP, Decimal
from typing import Union

DEFAULT_CURRENCY_SYMBOL = "R$"


def to_minor_units(major: Union[int, float, str, Decimal]) -> int:
    """Convert a major-unit amount (e.g. 12.34) to integer cents."""
    return int((Decimal(str(major)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(minor: int) -> float:
    return minor / 100


def format_amount(minor: int) -> str:
    """Major units with two decimals, e.g. 123456 -> '1234.56'."""
    return f"{minor / 100:.2f}"


def format_currency(minor: int, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    return f"{symbol} {format_amount(minor)}"
