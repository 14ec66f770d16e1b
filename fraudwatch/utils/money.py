"""Currency amount conversion utilities"""

from decimal import ROUND_HALF_UP, Decimal


def to_cents(amount: Decimal | float | int | str) -> int:
    """Convert a currency amount to integer cents (half-up to the nearest cent)"""
    value = Decimal(str(amount))
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_cents(amount_cents: int) -> str:
    """Render cents as a dollar string, e.g. 123456 -> '$1,234.56'"""
    sign = "-" if amount_cents < 0 else ""
    dollars, cents = divmod(abs(amount_cents), 100)
    return f"{sign}${dollars:,}.{cents:02d}"


def cents_to_decimal(amount_cents: int) -> Decimal:
    """Convert integer cents back to a two-place Decimal amount"""
    return Decimal(amount_cents).scaleb(-2)


# Largest amount whose cent value fits a signed 64-bit column
MAX_AMOUNT = cents_to_decimal(2**63 - 1)
