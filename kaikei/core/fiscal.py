# ===============================
# kaikei/core/fiscal.py
# ===============================
"""
事業年度（会計期間）の計算

「現在の事業年度」のような状態は持たず、日付と決算月から毎回求める。
事業年度のラベルは期首の属する暦年（3月決算で 2024-04-01〜2025-03-31 なら "2024"）。
"""

from __future__ import annotations

import datetime
from calendar import monthrange
from dataclasses import dataclass
from typing import Iterator

from kaikei.core.errors import DomainLimitError, InvalidDateRangeError


@dataclass(frozen=True)
class FiscalPeriod:
    start: datetime.date
    end: datetime.date

    @property
    def label(self) -> str:
        return str(self.start.year)


def to_date(value) -> datetime.date:
    """'YYYY-MM-DD' 文字列 / date / datetime を date に揃える"""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value)
        except ValueError as e:
            raise DomainLimitError(f"日付形式が不正です: {value!r}") from e
    raise DomainLimitError(f"日付として解釈できません: {value!r}")


def check_range(date_from, date_to) -> tuple[datetime.date, datetime.date]:
    """集計期間を検証して (from, to) を返す"""
    d_from = to_date(date_from)
    d_to = to_date(date_to)
    if d_from > d_to:
        raise InvalidDateRangeError(f"期間が逆転しています: {d_from} > {d_to}")
    return d_from, d_to


def _check_end_month(fiscal_year_end_month: int) -> None:
    if not 1 <= int(fiscal_year_end_month) <= 12:
        raise DomainLimitError(f"決算月は 1〜12 で指定してください: {fiscal_year_end_month}")


def start_month_of(fiscal_year_end_month: int) -> int:
    """決算月 → 期首月（3月決算なら4月）"""
    _check_end_month(fiscal_year_end_month)
    return fiscal_year_end_month % 12 + 1


def month_end(year: int, month: int) -> datetime.date:
    return datetime.date(year, month, monthrange(year, month)[1])


def fiscal_period(label, fiscal_year_end_month: int) -> FiscalPeriod:
    """事業年度ラベル（期首の暦年）→ 期間"""
    start_month = start_month_of(fiscal_year_end_month)
    try:
        start_year = int(label)
    except (TypeError, ValueError) as e:
        raise DomainLimitError(f"事業年度は期首の西暦年で指定してください: {label!r}") from e
    end_year = start_year if fiscal_year_end_month == 12 else start_year + 1
    return FiscalPeriod(
        start=datetime.date(start_year, start_month, 1),
        end=month_end(end_year, fiscal_year_end_month),
    )


def fiscal_year_for(d, fiscal_year_end_month: int) -> FiscalPeriod:
    """日付が属する事業年度を返す"""
    d = to_date(d)
    start_month = start_month_of(fiscal_year_end_month)
    start_year = d.year if d.month >= start_month else d.year - 1
    return fiscal_period(start_year, fiscal_year_end_month)


def first_year_months(acquisition_date, fiscal_year_end_month: int) -> int:
    """取得月から期末月までの使用月数（取得月を含む、1〜12）"""
    d = to_date(acquisition_date)
    _check_end_month(fiscal_year_end_month)
    return (fiscal_year_end_month - d.month) % 12 + 1


def month_ranges(date_from, date_to) -> Iterator[tuple[str, datetime.date, datetime.date]]:
    """期間に含まれる暦月ごとに (ラベル 'YYYY/MM', 月初, 月末) を返す

    最初と最後の月は指定期間で切り詰める。
    """
    d_from, d_to = check_range(date_from, date_to)
    year, month = d_from.year, d_from.month
    while (year, month) <= (d_to.year, d_to.month):
        start = max(datetime.date(year, month, 1), d_from)
        end = min(month_end(year, month), d_to)
        yield f"{year}/{month:02d}", start, end
        month += 1
        if month > 12:
            year, month = year + 1, 1

# ===============================
# END fiscal.py
# ===============================
