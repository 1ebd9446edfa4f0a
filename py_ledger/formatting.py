from datetime import datetime
from typing import Optional

NOT_SET = "NOT SET"

CURRENCY_SYMBOLS = {"INR": "₹", "USD": "$"}


def _group_indian(integer_part: str) -> str:
    # Last three digits, then groups of two: 12,34,567
    if len(integer_part) <= 3:
        return integer_part
    head, tail = integer_part[:-3], integer_part[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_number(value: float, currency: str = "INR", decimals: int = 2) -> str:
    """ Display-only grouping; INR uses lakh/crore grouping, everything else Western. """
    if value != value:
        return "NaN"
    sign = "-" if value < 0 else ""
    text = f"{abs(value):.{decimals}f}"
    integer_part, _, fraction = text.partition(".")
    if currency.upper() == "INR":
        grouped = _group_indian(integer_part)
    else:
        grouped = f"{int(integer_part):,}"
    return sign + grouped + ("." + fraction if fraction else "")


def format_currency(value: float, currency: str = "INR") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper() + " ")
    number = format_number(value, currency)
    if number.startswith("-"):
        return "-" + symbol + number[1:]
    return symbol + number


def format_price(price: float, currency: str = "INR") -> str:
    """ A zero price is the unset sentinel. """
    if price == 0:
        return NOT_SET
    return format_currency(price, currency)


def format_quantity(quantity: float) -> str:
    if float(quantity).is_integer():
        return f"{int(quantity):,}"
    return f"{quantity:,.4f}".rstrip("0").rstrip(".")


def format_date(dt: Optional[datetime]) -> str:
    return dt.strftime("%d/%m/%Y") if dt else ""
