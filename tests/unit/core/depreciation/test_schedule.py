"""
減価償却スケジュールのテスト
"""

import datetime
from decimal import Decimal

import pytest

from kaikei.core.depreciation.guarantee import guarantee_rate
from kaikei.core.depreciation.unit import (
    DepreciationUnit,
    generate_schedule,
    get_current_year_depreciation,
)
from kaikei.core.errors import DomainLimitError, UnsupportedMethodError
from kaikei.core.ledger.types import DepreciationMethod

SL = DepreciationMethod.STRAIGHT_LINE
DB = DepreciationMethod.DECLINING_BALANCE


def _asset(cost, life, method=SL, acquired="2024-04-01", residual=1) -> DepreciationUnit:
    return DepreciationUnit(
        name="テスト資産",
        acquisition_date=acquired,
        acquisition_cost=cost,
        useful_life=life,
        depreciation_method=method,
        residual_value=residual,
    )


class TestStraightLine:
    """定額法"""

    def test_example_300000_over_4_years(self) -> None:
        rows = generate_schedule(_asset(300_000, 4), 3)
        assert [r.amount for r in rows] == [74_999, 74_999, 74_999, 74_999, 3]
        assert len(rows) == 5
        assert rows[-1].end_book_value == 1
        assert [r.fiscal_year for r in rows] == ["2024", "2025", "2026", "2027", "2028"]
        assert rows[0].period_start == datetime.date(2024, 4, 1)
        assert rows[0].period_end == datetime.date(2025, 3, 31)

    def test_first_year_pro_rated(self) -> None:
        rows = generate_schedule(_asset(120_001, 5, acquired="2024-10-01"), 3)
        assert rows[0].months == 6
        assert rows[0].amount == 12_000
        assert [r.amount for r in rows[1:]] == [24_000, 24_000, 24_000, 24_000, 12_000]
        assert all(r.months == 12 for r in rows[1:])
        assert rows[-1].end_book_value == 1

    def test_rows_chain(self) -> None:
        rows = generate_schedule(_asset(1_000_000, 7, acquired="2024-08-20"), 3)
        for prev, row in zip(rows, rows[1:]):
            assert row.start_book_value == prev.end_book_value
            assert row.accumulated == prev.accumulated + row.amount
            assert int(row.fiscal_year) == int(prev.fiscal_year) + 1


class TestDecliningBalance:
    """200%定率法"""

    def test_switch_to_straight_line(self) -> None:
        rows = generate_schedule(_asset(1_000_000, 5, DB), 3)
        assert [r.amount for r in rows] == [400_000, 240_000, 144_000, 107_999, 107_999, 1]
        assert [r.basis for r in rows] == [DB, DB, DB, SL, SL, SL]
        assert rows[-1].end_book_value == 1

    def test_life_two_never_switches(self) -> None:
        rows = generate_schedule(_asset(100_000, 2, DB), 3)
        assert [r.amount for r in rows] == [99_999]
        assert rows[0].basis == DB

    @pytest.mark.parametrize("life", [3, 4, 5, 6, 8, 10, 15, 20, 30])
    @pytest.mark.parametrize("acquired", ["2024-04-01", "2024-09-10", "2025-03-01"])
    def test_switch_is_one_way(self, life: int, acquired: str) -> None:
        rows = generate_schedule(_asset(3_000_000, life, DB, acquired), 3)
        bases = [r.basis for r in rows]
        if SL in bases:
            first = bases.index(SL)
            assert all(b == SL for b in bases[first:])


class TestImmediateAndBulk:
    def test_immediate(self) -> None:
        rows = generate_schedule(_asset(250_000, 4, DepreciationMethod.IMMEDIATE, "2024-12-01"), 3)
        assert len(rows) == 1
        assert rows[0].amount == 249_999
        assert rows[0].months == 4
        assert rows[0].fiscal_year == "2024"

    def test_bulk_three_years(self) -> None:
        rows = generate_schedule(_asset(100_000, 0, DepreciationMethod.BULK_3YEAR, "2025-02-01"), 3)
        assert [r.amount for r in rows] == [33_333, 33_333, 33_333]
        assert [r.fiscal_year for r in rows] == ["2024", "2025", "2026"]
        assert rows[-1].end_book_value == 1

    def test_bulk_never_overshoots(self) -> None:
        rows = generate_schedule(_asset(300, 0, DepreciationMethod.BULK_3YEAR, residual=250), 3)
        assert [r.amount for r in rows] == [50]
        assert rows[-1].end_book_value == 250


class TestExactness:
    """どの組み合わせでも残存価額ちょうどで終わる"""

    COSTS = [1, 2, 3, 10, 999, 100_000, 1_234_567]
    LIVES = [1, 2, 3, 4, 5, 7, 10, 15, 20, 22]
    RESIDUALS = [0, 1]
    ACQUIRED = ["2024-04-01", "2024-10-15", "2025-03-31"]

    @pytest.mark.parametrize("method", list(DepreciationMethod))
    def test_grid(self, method: DepreciationMethod) -> None:
        for cost in self.COSTS:
            for life in self.LIVES:
                for residual in self.RESIDUALS:
                    for acquired in self.ACQUIRED:
                        if residual > cost:
                            continue
                        rows = generate_schedule(_asset(cost, life, method, acquired, residual), 3)
                        case = (method, cost, life, residual, acquired)
                        if cost == residual:
                            assert rows == [], case
                            continue
                        assert rows[-1].end_book_value == residual, case
                        assert sum(r.amount for r in rows) == cost - residual, case
                        assert all(r.amount >= 0 and r.end_book_value >= residual for r in rows), case


class TestValidation:
    def test_residual_over_cost(self) -> None:
        with pytest.raises(DomainLimitError):
            generate_schedule(_asset(100, 4, residual=101), 3)

    def test_negative_cost(self) -> None:
        with pytest.raises(DomainLimitError):
            generate_schedule(_asset(-1, 4, residual=0), 3)

    @pytest.mark.parametrize("method", [SL, DB])
    def test_life_must_be_positive(self, method) -> None:
        with pytest.raises(DomainLimitError):
            generate_schedule(_asset(100_000, 0, method), 3)

    def test_unknown_method(self) -> None:
        with pytest.raises(UnsupportedMethodError):
            _asset(100_000, 4, "sum_of_years")

    def test_cost_equals_residual(self) -> None:
        assert generate_schedule(_asset(1, 4), 3) == []


class TestCurrentYear:
    def test_lookup_matches_schedule(self) -> None:
        asset = _asset(300_000, 4)
        assert get_current_year_depreciation(asset, "2025", 3) == 74_999
        assert get_current_year_depreciation(asset, 2028, 3) == 3
        assert asset.get_current_year_depreciation(2030, 3) == 0
        assert get_current_year_depreciation(asset, 2023, 3) == 0


class TestGuaranteeRate:
    def test_table(self) -> None:
        assert guarantee_rate(5) == Decimal("0.10800")
        assert guarantee_rate(10) == Decimal("0.06552")
        assert guarantee_rate(2) == 0

    def test_fallback_warns(self, caplog) -> None:
        with caplog.at_level("WARNING"):
            assert guarantee_rate(25) == Decimal(1) / Decimal(625)
        assert "25" in caplog.text
