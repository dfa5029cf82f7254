# src/domain/date_range.py

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator, Tuple, Union

DateInput = Union[str, date]


def parse_date(value: DateInput) -> date:
    """
    'YYYY-MM-DD' string'ini date'e çevirir. date gelirse aynen döner.
    Hatalı formatta ValueError fırlatır.
    """
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def iter_days(start_date: DateInput, end_date: DateInput) -> Iterator[date]:
    """
    start_date ile end_date (dahil) arasındaki günleri artan sırada üretir.
    start_date > end_date ise hiçbir şey üretmez.
    """
    current = parse_date(start_date)
    end = parse_date(end_date)
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """
    Verilen ay için (ilk gün, son gün) döner.
    """
    if month < 1 or month > 12:
        raise ValueError(f"Geçersiz ay: {month}")

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
