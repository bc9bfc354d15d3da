"""
Display formatting for event listings, tickets and registration pages.

    format_date(date(2026, 10, 19))   -> "October 19, 2026"
    format_time(time(14, 30))         -> "2:30 PM"
    format_fee(Decimal("150.00"))     -> "₹150"
    format_fee(0)                     -> "Free"
"""

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

NOT_AVAILABLE = "N/A"
CURRENCY_SYMBOL = "₹"

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def _to_date(value: Union[date, str, None]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _to_time(value: Union[time, str, None]) -> Optional[time]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.time()
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value))
    except ValueError:
        return None


def format_date(value: Union[date, str, None]) -> str:
    """Long US-style date, e.g. "October 19, 2026" """
    d = _to_date(value)
    if d is None:
        return NOT_AVAILABLE
    return f"{MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"


def format_time(value: Union[time, str, None]) -> str:
    """12-hour clock, e.g. "2:30 PM"; midnight is "12:00 AM" """
    t = _to_time(value)
    if t is None:
        return NOT_AVAILABLE
    suffix = "PM" if t.hour >= 12 else "AM"
    hour = t.hour % 12 or 12
    return f"{hour}:{t.minute:02d} {suffix}"


def format_fee(amount: Union[Decimal, float, int, str, None]) -> str:
    """Rupee amount, whole numbers without decimals; 0 or missing is "Free" """
    if amount is None or amount == "":
        return "Free"
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return "Free"
    if value <= 0:
        return "Free"

    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if value == value.to_integral_value():
        return f"{CURRENCY_SYMBOL}{int(value)}"
    return f"{CURRENCY_SYMBOL}{value:.2f}"


def to_minor_units(amount: Union[Decimal, float, int, str]) -> int:
    """Rupees to paise, rounded half-up"""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
