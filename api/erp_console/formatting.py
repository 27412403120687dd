from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Number = Union[int, float, Decimal]


def _group(int_part: str) -> str:
    # vi-VN groups thousands with "."
    out = []
    while len(int_part) > 3:
        out.insert(0, int_part[-3:])
        int_part = int_part[:-3]
    out.insert(0, int_part)
    return ".".join(out)


def format_number(num: Optional[Number], max_decimals: int = 3) -> str:
    """1234567.5 -> '1.234.567,5'"""
    if num is None:
        return ""
    d = Decimal(str(num))
    q = Decimal(1).scaleb(-max_decimals)
    d = d.quantize(q, rounding=ROUND_HALF_UP)
    sign = "-" if d < 0 else ""
    text = format(abs(d), "f")
    int_part, _, frac = text.partition(".")
    frac = frac.rstrip("0")
    out = sign + _group(int_part)
    return f"{out},{frac}" if frac else out


def format_currency(amount: Optional[Number]) -> str:
    """VND has no minor unit: 1234567 -> '1.234.567 ₫'"""
    if amount is None:
        return ""
    return f"{format_number(amount, max_decimals=0)} ₫"


def _to_date(value: Union[str, date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def format_date(value: Union[str, date, datetime, None], long: bool = False) -> str:
    if not value:
        return ""
    d = _to_date(value)
    return d.strftime("%d/%m/%Y %H:%M") if long else d.strftime("%d/%m/%Y")


def format_month(month: Optional[str]) -> str:
    """'202501' -> '01/2025'; anything else is returned as-is."""
    if not month or len(month) != 6 or not month.isdigit():
        return month or ""
    return f"{month[4:]}/{month[:4]}"
