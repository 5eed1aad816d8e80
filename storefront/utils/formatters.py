# storefront/utils/formatters.py
from decimal import Decimal, ROUND_HALF_UP

_SYMBOLS = {"INR": "₹"}


def _group_indian(digits: str) -> str:
    # 1234567 -> 12,34,567
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_price(amount, currency: str = "INR") -> str:
    """Whole-unit price the way the storefront shows it, e.g. ``₹1,29,999``."""
    value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = str(abs(value))

    if currency == "INR":
        return f"{sign}{_SYMBOLS['INR']}{_group_indian(digits)}"
    return f"{sign}{currency} {int(digits):,}"
