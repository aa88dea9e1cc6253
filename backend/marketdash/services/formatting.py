"""
Number and date formatting shared by all source adapters.
"""
import math
from datetime import date, datetime
from typing import Any, Union

Number = Union[int, float]

# Chart labels carry no year; table dates do.
DAY_LABEL_FORMAT = "%b %d"
TABLE_DATE_FORMAT = "%b %d, %Y"


def plain_number(num: Number) -> str:
    """Render a number the way the dashboard displays raw values: 1000.0 -> '1000', 2.5 -> '2.5'."""
    if isinstance(num, float) and num.is_integer():
        return str(int(num))
    return str(num)


def format_number(num: Number) -> str:
    """
    Compress large magnitudes into k/m/b suffixed strings.

    Examples:
        1_500_000_000 -> '1.50b'
        2_300 -> '2.30k'
        42 -> '42'
    """
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000:.2f}b"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.2f}m"
    if num >= 1_000:
        return f"{num / 1_000:.2f}k"
    return plain_number(num)


def format_currency(num: Number) -> str:
    return f"${format_number(num)}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"


def round_percent(value: float, digits: int = 2) -> float:
    return round(value, digits)


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce an upstream numeric value (number, numeric string, None) to a finite float."""
    if value is None or isinstance(value, bool):
        return default
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def day_label(day: Union[date, datetime]) -> str:
    return day.strftime(DAY_LABEL_FORMAT)


def table_date(day: Union[date, datetime]) -> str:
    return day.strftime(TABLE_DATE_FORMAT)


def parse_table_date(label: str) -> date:
    return datetime.strptime(label, TABLE_DATE_FORMAT).date()
