"""
決算整理仕訳（YearEndEntryGenerator）のテスト
"""

import datetime

import pytest

from kaikei.core.bookkeeping.year_end_entries import (
    SETTLEMENT_TEMPLATES,
    YearEndEntryGenerator,
    get_template,
    templates_by_category,
)
from kaikei.core.depreciation.unit import DepreciationUnit
from kaikei.core.errors import DomainLimitError
from kaikei.core.ledger.types import EntryStatus, Side


@pytest.fixture
def generator(ledger) -> YearEndEntryGenerator:
    return YearEndEntryGenerator(ledger)


@pytest.fixture
def pc(ledger, acct) -> DepreciationUnit:
    """2024-04-01 取得のパソコン（30万円・4年・定額法）"""
    return ledger.add_asset(
        DepreciationUnit(
            name="パソコン",
            acquisition_date="2024-04-01",
            acquisition_cost=300_000,
            useful_life=4,
            account_id=acct("1700"),
            expense_account_id=acct("5450"),
        )
    )


class TestDepreciationEntries:
    """減価償却仕訳の計上"""

    def test_one_entry_per_asset(self, generator, pc, acct) -> None:
        entries = generator.generate_depreciation_entries(2024)
        assert len(entries) == 1
        entry = entries[0]
        assert entry.date == datetime.date(2025, 3, 31)
        assert entry.description == "減価償却費 パソコン"
        assert entry.status == EntryStatus.DRAFT
        assert entry.source_ref == f"depreciation:{pc.id}:2024"

        debit = next(l for l in entry.lines if l.side == Side.DEBIT)
        credit = next(l for l in entry.lines if l.side == Side.CREDIT)
        assert (debit.account_id, debit.amount) == (acct("5450"), 74_999)
        assert (credit.account_id, credit.amount) == (acct("1700"), 74_999)

    def test_not_posted_twice(self, generator, pc, ledger) -> None:
        generator.generate_depreciation_entries(2024)
        assert generator.generate_depreciation_entries(2024) == []
        assert len(ledger.entries) == 1

    def test_confirmed_status(self, generator, pc) -> None:
        entries = generator.generate_depreciation_entries(2024, status=EntryStatus.CONFIRMED)
        assert entries[0].is_confirmed

    def test_disposed_asset_skipped(self, generator, pc) -> None:
        pc.disposal_date = datetime.date(2025, 4, 1)
        assert generator.generate_depreciation_entries(2025) == []
        assert len(generator.generate_depreciation_entries(2024)) == 1

    def test_no_depreciation_that_year(self, generator, pc) -> None:
        assert generator.generate_depreciation_entries(2030) == []

    def test_book_value_reduced_directly(self, generator, pc, finance) -> None:
        generator.generate_depreciation_entries(2024, status=EntryStatus.CONFIRMED)
        generator.ledger.post_entry({
            "date": "2024-04-01",
            "status": "confirmed",
            "lines": [
                {"side": "debit", "account_code": "1700", "amount": 300_000},
                {"side": "credit", "account_code": "1200", "amount": 300_000},
            ],
        })
        bs = finance.get_balance_sheet("c1", "2024-04-01", "2025-03-31")
        equipment = next(i for i in bs.assets.items if i.code == "1700")
        assert equipment.amount == 300_000 - 74_999


class TestSettlementTemplates:
    def test_catalogue(self) -> None:
        assert len(SETTLEMENT_TEMPLATES) == 8
        assert get_template("accrued_rent").debit_account_code == "5340"
        assert set(templates_by_category()) == {"depreciation", "accrual", "prepaid", "tax"}

    def test_unknown_template(self, generator) -> None:
        with pytest.raises(DomainLimitError):
            generator.generate_settlement_entry("bonus", "2025-03-31", 1000)

    def test_entry_from_template(self, generator, acct) -> None:
        entry = generator.generate_settlement_entry("corporate_tax", "2025-03-31", 70_000)
        assert entry.status == EntryStatus.DRAFT
        assert entry.description == "法人税等の計上"
        assert {(l.side, l.account_id) for l in entry.lines} == {
            (Side.DEBIT, acct("5700")),
            (Side.CREDIT, acct("2320")),
        }

    def test_memo_overrides_name(self, generator) -> None:
        entry = generator.generate_settlement_entry("prepaid_rent", "2025-03-31", 100_000, memo="4月分家賃")
        assert entry.description == "4月分家賃"

    def test_missing_account(self, generator, ledger, acct) -> None:
        ledger.remove_account(acct("2320"))
        with pytest.raises(DomainLimitError) as exc:
            generator.generate_settlement_entry("corporate_tax", "2025-03-31", 70_000)
        assert "2320" in str(exc.value)


class TestConsumptionTaxSettlement:
    """仮受消費税・仮払消費税の相殺"""

    def _tax_entries(self, post, received: int, paid: int) -> None:
        if received:
            post("2024-06-01", "1200", "2360", received)
        if paid:
            post("2024-06-02", "1500", "1200", paid)

    def _lines(self, entry):
        return {(l.side, l.account_id): l.amount for l in entry.lines}

    def test_payable(self, generator, post, acct) -> None:
        self._tax_entries(post, 10_000, 4_000)
        entry = generator.generate_consumption_tax_settlement(2024)
        assert entry.date == datetime.date(2025, 3, 31)
        assert self._lines(entry) == {
            (Side.DEBIT, acct("2360")): 10_000,
            (Side.CREDIT, acct("1500")): 4_000,
            (Side.CREDIT, acct("2330")): 6_000,
        }

    def test_receivable(self, generator, post, acct) -> None:
        self._tax_entries(post, 1_000, 5_000)
        entry = generator.generate_consumption_tax_settlement(2024)
        assert self._lines(entry) == {
            (Side.DEBIT, acct("2360")): 1_000,
            (Side.CREDIT, acct("1500")): 5_000,
            (Side.DEBIT, acct("1510")): 4_000,
        }

    def test_nothing_to_settle(self, generator) -> None:
        assert generator.generate_consumption_tax_settlement(2024) is None

    def test_only_once(self, generator, post) -> None:
        self._tax_entries(post, 10_000, 4_000)
        assert generator.generate_consumption_tax_settlement(2024) is not None
        assert generator.generate_consumption_tax_settlement(2024) is None


class TestAutoCalculatedTemplates:
    """自動計算テンプレートは専用の生成処理に回る"""

    def test_depreciation_credits_asset_account(self, generator, pc, ledger, acct) -> None:
        entries = generator.generate_from_template("depreciation", 2024)
        assert len(entries) == 1
        credit = next(l for l in entries[0].lines if l.side == Side.CREDIT)
        assert credit.account_id == acct("1700")

    def test_no_accumulated_depreciation_account(self, generator, pc, ledger) -> None:
        assert ledger.registry.by_code("1900") is None
        assert get_template("depreciation").credit_account_code is None

        generator.generate_from_template("depreciation", 2024)
        touched = {ledger.registry.get(l.account_id).code for e in ledger.entries for l in e.lines}
        assert touched == {"5450", "1700"}

    def test_settlement_entry_rejects_depreciation(self, generator, pc, ledger) -> None:
        with pytest.raises(DomainLimitError):
            generator.generate_settlement_entry("depreciation", "2025-03-31", 1000)
        assert ledger.entries == []

    def test_consumption_tax(self, generator, post) -> None:
        post("2024-06-01", "1200", "2360", 10_000)
        entries = generator.generate_from_template("consumption_tax", 2024)
        assert [e.source_ref for e in entries] == ["consumption_tax:2024"]
        assert generator.generate_from_template("consumption_tax", 2024) == []

    def test_manual_template_needs_amount(self, generator) -> None:
        with pytest.raises(DomainLimitError):
            generator.generate_from_template("accrued_rent", 2024)

    def test_non_numeric_fiscal_year(self, generator, pc) -> None:
        with pytest.raises(DomainLimitError):
            generator.generate_depreciation_entries("FY2024")


class TestDepreciationSummary:
    """固定資産台帳（当期償却額・償却累計額・期末帳簿価額）"""

    @pytest.fixture
    def car(self, ledger, acct) -> DepreciationUnit:
        """2024-04-01 取得・2025-04-01 除却の車両（12万円・即時償却）"""
        return ledger.add_asset(
            DepreciationUnit(
                name="車両",
                acquisition_date="2024-04-01",
                acquisition_cost=120_000,
                useful_life=1,
                depreciation_method="immediate",
                account_id=acct("1710"),
                expense_account_id=acct("5450"),
                disposal_date="2025-04-01",
            )
        )

    def test_second_year(self, generator, pc) -> None:
        summary = generator.depreciation_summary(2025)
        assert summary.fiscal_year == "2025"
        (row,) = summary.assets
        assert row.asset is pc
        assert row.current_year_amount == 74_999
        assert row.accumulated == 149_998
        assert row.book_value == 150_002
        assert summary.total_current_year == 74_999

    def test_before_acquisition(self, generator, pc) -> None:
        (row,) = generator.depreciation_summary(2023).assets
        assert (row.current_year_amount, row.accumulated, row.book_value) == (0, 0, 300_000)

    def test_fully_depreciated(self, generator, pc) -> None:
        (row,) = generator.depreciation_summary(2030).assets
        assert (row.current_year_amount, row.accumulated, row.book_value) == (0, 299_999, 1)

    def test_disposed_asset_left_out(self, generator, pc, car) -> None:
        first = generator.depreciation_summary(2024)
        assert [a.asset.name for a in first.assets] == ["パソコン", "車両"]
        assert first.total_current_year == 74_999 + 119_999

        assert [a.asset.name for a in generator.depreciation_summary(2025).assets] == ["パソコン"]

    def test_matches_posted_entries(self, generator, pc, car) -> None:
        posted = sum(e.debit_total for e in generator.generate_depreciation_entries(2024))
        assert posted == generator.depreciation_summary(2024).total_current_year
