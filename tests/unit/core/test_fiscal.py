"""
kaikei/core/fiscal.py テスト
"""

import datetime

import pytest

from kaikei.core.errors import DomainLimitError, InvalidDateRangeError
from kaikei.core.fiscal import (
    first_year_months,
    fiscal_period,
    fiscal_year_for,
    month_ranges,
    to_date,
)


class TestFiscalYearFor:
    """fiscal_year_for テスト"""

    def test_march_year_end(self) -> None:
        """3月決算: 2024-04-15 は 2024-04-01〜2025-03-31"""
        p = fiscal_year_for("2024-04-15", 3)
        assert p.start == datetime.date(2024, 4, 1)
        assert p.end == datetime.date(2025, 3, 31)
        assert p.label == "2024"

    def test_date_before_start_month_belongs_to_previous_year(self) -> None:
        p = fiscal_year_for(datetime.date(2025, 3, 31), 3)
        assert p.label == "2024"

    def test_december_year_end(self) -> None:
        p = fiscal_year_for("2024-12-31", 12)
        assert p.start == datetime.date(2024, 1, 1)
        assert p.end == datetime.date(2024, 12, 31)

    def test_february_year_end_leap_year(self) -> None:
        p = fiscal_year_for("2023-03-01", 2)
        assert p.end == datetime.date(2024, 2, 29)

    def test_invalid_end_month(self) -> None:
        with pytest.raises(DomainLimitError):
            fiscal_year_for("2024-04-01", 13)

    def test_fiscal_period_is_inverse(self) -> None:
        p = fiscal_year_for("2024-10-01", 9)
        assert fiscal_period(p.label, 9) == p

    @pytest.mark.parametrize("label", ["FY2024", "", None])
    def test_non_numeric_label(self, label) -> None:
        with pytest.raises(DomainLimitError):
            fiscal_period(label, 3)


class TestFirstYearMonths:
    """取得月から期末月までの月数"""

    @pytest.mark.parametrize(
        "acquired, end_month, expected",
        [
            ("2024-04-01", 3, 12),
            ("2024-04-30", 3, 12),
            ("2024-03-10", 3, 1),
            ("2024-10-01", 3, 6),
            ("2024-01-15", 12, 12),
            ("2024-12-01", 12, 1),
        ],
    )
    def test_months(self, acquired: str, end_month: int, expected: int) -> None:
        assert first_year_months(acquired, end_month) == expected


class TestMonthRanges:
    """month_ranges テスト"""

    def test_clips_first_and_last_month(self) -> None:
        ranges = list(month_ranges("2024-04-15", "2024-06-10"))
        assert ranges == [
            ("2024/04", datetime.date(2024, 4, 15), datetime.date(2024, 4, 30)),
            ("2024/05", datetime.date(2024, 5, 1), datetime.date(2024, 5, 31)),
            ("2024/06", datetime.date(2024, 6, 1), datetime.date(2024, 6, 10)),
        ]

    def test_crosses_year(self) -> None:
        labels = [label for label, _, _ in month_ranges("2024-11-01", "2025-02-28")]
        assert labels == ["2024/11", "2024/12", "2025/01", "2025/02"]

    def test_reversed_range(self) -> None:
        with pytest.raises(InvalidDateRangeError):
            list(month_ranges("2024-05-01", "2024-04-01"))


class TestToDate:
    def test_datetime_is_truncated(self) -> None:
        assert to_date(datetime.datetime(2024, 4, 1, 12, 30)) == datetime.date(2024, 4, 1)

    def test_bad_string(self) -> None:
        with pytest.raises(DomainLimitError):
            to_date("2024/04/01")
