"""
帳票の表形式出力（DataFrame / CSV）のテスト
"""

import pandas as pd

from kaikei.core.bookkeeping.year_end_entries import YearEndEntryGenerator
from kaikei.core.depreciation.unit import DepreciationUnit
from kaikei.core.reporting.export import (
    DEPRECIATION_COLUMNS,
    STATEMENT_COLUMNS,
    TAX_COLUMNS,
    TRIAL_BALANCE_COLUMNS,
    balance_sheet_df,
    consumption_tax_df,
    depreciation_summary_df,
    monthly_trend_df,
    profit_loss_df,
    settlement_templates_df,
    to_csv,
    trial_balance_df,
)

FY_FROM, FY_TO = "2024-04-01", "2025-03-31"


class TestStatementFrames:
    def test_trial_balance(self, finance, post) -> None:
        post("2024-04-15", "1100", "4100", 10000)
        df = trial_balance_df(finance.get_trial_balance("c1", FY_FROM, FY_TO))
        assert list(df.columns) == TRIAL_BALANCE_COLUMNS
        assert df.iloc[0]["勘定科目コード"] == "1100"
        assert df.iloc[0]["区分"] == "資産"
        total = df.iloc[-1]
        assert total["借方残高"] == total["貸方残高"] == 10000

    def test_balance_sheet(self, finance, post) -> None:
        post("2024-04-15", "1100", "4100", 10000)
        df = balance_sheet_df(finance.get_balance_sheet("c1", FY_FROM, FY_TO))
        assert list(df.columns) == STATEMENT_COLUMNS
        by_name = dict(zip(df["勘定科目"], df["金額"]))
        assert by_name["資産合計"] == 10000
        assert by_name["当期純利益"] == 10000
        assert by_name["負債・純資産合計"] == 10000

    def test_profit_loss(self, finance, post) -> None:
        post("2024-04-15", "1100", "4100", 10000)
        post("2024-04-16", "5340", "1100", 4000)
        df = profit_loss_df(finance.get_profit_loss("c1", FY_FROM, FY_TO))
        by_name = dict(zip(df["勘定科目"], df["金額"]))
        assert by_name["売上総利益"] == 10000
        assert by_name["営業利益"] == 6000
        assert df.iloc[-1]["勘定科目"] == "当期純利益"
        assert df.iloc[-1]["金額"] == 6000


class TestMonthlyTrendPivot:
    def test_pivot(self, finance, post) -> None:
        post("2024-04-10", "1200", "4100", 1000)
        post("2024-06-10", "1200", "4100", 500)
        df = monthly_trend_df(finance.get_monthly_trend("c1", "2024-04-01", "2024-06-30"))
        assert list(df.columns) == ["コード", "科目名", "区分", "2024/04", "2024/05", "2024/06"]
        sales = df[df["コード"] == "4100"].iloc[0]
        assert [sales["2024/04"], sales["2024/05"], sales["2024/06"]] == [1000, 0, 500]
        assert list(df["コード"]) == ["1200", "4100"]

    def test_empty(self, finance) -> None:
        df = monthly_trend_df(finance.get_monthly_trend("c1", "2024-04-01", "2024-05-31"))
        assert df.empty
        assert list(df.columns) == ["コード", "科目名", "区分", "2024/04", "2024/05"]


class TestCsv:
    def test_string_has_bom(self) -> None:
        text = to_csv(pd.DataFrame({"勘定科目": ["現金"], "金額": [100]}))
        assert text.startswith("\ufeff")
        assert "現金,100" in text

    def test_file_is_excel_readable(self, temp_dir, finance, post) -> None:
        post("2024-04-15", "1100", "4100", 10000)
        path = temp_dir / "trial-balance.csv"
        to_csv(trial_balance_df(finance.get_trial_balance("c1", FY_FROM, FY_TO)), path)
        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        back = pd.read_csv(path, encoding="utf-8-sig", dtype={"勘定科目コード": str})
        assert back.iloc[0]["勘定科目コード"] == "1100"


class TestTaxAndAssetFrames:
    def test_consumption_tax_standard(self, tax_engine, post) -> None:
        post("2024-05-01", "1200", "4100", 110_000, "sales_10")
        post("2024-05-02", "5110", "1200", 55_000, "purchase_10")
        df = consumption_tax_df(tax_engine.calculate_consumption_tax("c1", FY_FROM, FY_TO))
        assert list(df.columns) == TAX_COLUMNS
        by_item = dict(zip(df["項目"], df["金額"]))
        assert by_item["課税売上高 10%"] == 110_000
        assert by_item["仕入に係る消費税額 合計"] == 5_000
        assert by_item["納付税額"] == 5_000
        assert (by_item["うち国税"], by_item["うち地方消費税"]) == (3_900, 1_100)

    def test_consumption_tax_simplified_shows_business_type(self, tax_engine, post) -> None:
        post("2024-05-01", "1200", "4100", 110_000, "sales_10")
        result = tax_engine.calculate_consumption_tax("c1", FY_FROM, FY_TO, method="simplified", business_type=5)
        df = consumption_tax_df(result)
        assert "みなし仕入率（第5種（サービス業等））" in set(df["項目"])
        assert not df["項目"].str.startswith("課税仕入高").any()

    def test_depreciation_summary(self, ledger, acct) -> None:
        ledger.add_asset(
            DepreciationUnit(
                name="パソコン",
                acquisition_date="2024-04-01",
                acquisition_cost=300_000,
                useful_life=4,
                account_id=acct("1700"),
                expense_account_id=acct("5450"),
            )
        )
        summary = YearEndEntryGenerator(ledger).depreciation_summary(2024)
        df = depreciation_summary_df(summary)
        assert list(df.columns) == DEPRECIATION_COLUMNS
        assert df.iloc[0]["償却方法"] == "定額法"
        assert df.iloc[0]["期末帳簿価額"] == 225_001
        assert df.iloc[-1]["資産名"] == "合計"
        assert df.iloc[-1]["当期償却額"] == 74_999

    def test_settlement_templates(self) -> None:
        df = settlement_templates_df()
        assert len(df) == 8
        dep = df[df["ID"] == "depreciation"].iloc[0]
        assert dep["区分"] == "減価償却"
        assert dep["貸方科目コード"] == "（各資産の科目）"
        assert dep["金額"] == "自動計算"
