"""
Money helpers shared by the domain models

All amounts are Decimal with two places (BRL cents).
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Convert any numeric value to a Decimal rounded half-up to cents"""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        # str() avoids binary float artifacts (0.1 + 0.2)
        value = Decimal(str(value))
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_brl(value: Number) -> str:
    """
    Format an amount the pt-BR way

    Example:
        format_brl(Decimal("1234.5")) -> "R$ 1.234,50"
    """
    amount = to_money(value)
    sign = "-" if amount < 0 else ""
    integer, cents = f"{abs(amount):,.2f}".split(".")
    return f"{sign}R$ {integer.replace(',', '.')},{cents}"


def format_number_br(value: Number) -> str:
    """Format a number without trailing zeros using a decimal comma (7.5 -> "7,5")"""
    amount = Decimal(str(value)).normalize()
    text = format(amount, "f")
    return text.replace(".", ",")
